# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Models package - Pydantic schemas and data models for the Domous OS platform.
"""

# Base models
from .base import BaseEntity

# Enumerations
from .enums import (
    PaymentStatus,
    PaymentType,
    EmploymentType,
    MemberStatus,
    BillingCycle,
    AutomationAction,
    PayableKind,
    Period,
    CompanyStatus,
    AppRole
)

# Core entities
from .entities import (
    TeamMember,
    PayableEntity,
    TeamPayment,
    PartnerCommission,
    CompanyExpense,
    CompanySettings,
    Company,
    UserRole
)

# Request models
from .requests import (
    AutomationQuery,
    PayablePath,
    MarkPaidRequest,
    CompanyPath,
    CompanySettingsRequest,
    ReportQuery,
    PayablesQuery,
    SignupRequest
)

# Response models
from .responses import (
    AutomationResults,
    AutomationResponse,
    ErrorResponse,
    PayableResponse,
    CompanySettingsResponse,
    DateRangeResponse,
    ComparisonResponse,
    MetricResponse,
    ReportResponse,
    PayableItemResponse,
    PayablesListResponse,
    SignupResponse
)

__all__ = [
    # Base models
    "BaseEntity",

    # Enumerations
    "PaymentStatus",
    "PaymentType",
    "EmploymentType",
    "MemberStatus",
    "BillingCycle",
    "AutomationAction",
    "PayableKind",
    "Period",
    "CompanyStatus",
    "AppRole",

    # Core entities
    "TeamMember",
    "PayableEntity",
    "TeamPayment",
    "PartnerCommission",
    "CompanyExpense",
    "CompanySettings",
    "Company",
    "UserRole",

    # Request models
    "AutomationQuery",
    "PayablePath",
    "MarkPaidRequest",
    "CompanyPath",
    "CompanySettingsRequest",
    "ReportQuery",
    "PayablesQuery",
    "SignupRequest",

    # Response models
    "AutomationResults",
    "AutomationResponse",
    "ErrorResponse",
    "PayableResponse",
    "CompanySettingsResponse",
    "DateRangeResponse",
    "ComparisonResponse",
    "MetricResponse",
    "ReportResponse",
    "PayableItemResponse",
    "PayablesListResponse",
    "SignupResponse"
]
