# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Services package - Storage access and side effects.
"""

from .mongodb import MongoDBService, get_mongodb_service, close_mongodb_connection
from .team_automation import TeamAutomationService, GenerationResult, SweepResult
from .payables import PayablesService, PayableNotFoundError, PayableItem, PayablesListing
from .reports import ReportsService, Report, Metric
from .signup import SignupService, SignupError

__all__ = [
    "MongoDBService",
    "get_mongodb_service",
    "close_mongodb_connection",
    "TeamAutomationService",
    "GenerationResult",
    "SweepResult",
    "PayablesService",
    "PayableNotFoundError",
    "PayableItem",
    "PayablesListing",
    "ReportsService",
    "Report",
    "Metric",
    "SignupService",
    "SignupError"
]
