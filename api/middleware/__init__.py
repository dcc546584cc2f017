# SPDX-License-Identifier: Apache-2.0

"""
Middleware package for request processing.

This package contains middleware components for CORS and error handling
in the Domous OS platform.
"""
