# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request models for API endpoints.
"""

from datetime import datetime
from typing import Optional
import re
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .enums import AutomationAction, PayableKind, Period


class AutomationQuery(BaseModel):
    """Query parameters of the team automation endpoint."""

    action: str = Field(
        default=AutomationAction.ALL.value,
        max_length=50,
        description="Phase to run: all, generate_salaries or update_overdue; anything else runs nothing"
    )


class PayablePath(BaseModel):
    """Path parameters identifying a payable document."""

    kind: PayableKind = Field(..., description="Collection holding the payable")
    payable_id: str = Field(..., min_length=1, description="Payable identifier")


class MarkPaidRequest(BaseModel):
    """Request model for settling a payable."""

    company_id: str = Field(..., min_length=1, description="Company owning the payable")
    paid_date: Optional[datetime] = Field(None, description="Settlement date, defaults to now")
    payment_method: Optional[str] = Field(None, max_length=50, description="Payment method")
    notes: Optional[str] = Field(None, max_length=1000, description="Payment notes")

    @field_validator('payment_method', 'notes')
    @classmethod
    def validate_payment_method(cls, v):
        """Normalize blank values to None."""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class CompanyPath(BaseModel):
    """Path parameters identifying a company."""

    company_id: str = Field(..., min_length=1, description="Company identifier")


class CompanySettingsRequest(BaseModel):
    """Request model for updating company settings."""

    default_payment_day: int = Field(..., ge=1, le=31, description="Fallback payment day")


class ReportQuery(BaseModel):
    """Query parameters of the report endpoints."""

    company_id: str = Field(..., min_length=1, description="Company identifier")
    period: Period = Field(default=Period.THIRTY_DAYS, description="Reporting period")


class PayablesQuery(BaseModel):
    """Query parameters of the open payables listing."""

    company_id: str = Field(..., min_length=1, description="Company identifier")
    period: Period = Field(default=Period.THIRTY_DAYS, description="Window ahead of today")
    kind: Optional[PayableKind] = Field(None, description="Restrict to one collection")


class SignupRequest(BaseModel):
    """Request model for provisioning a freshly signed-up user."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., min_length=1, alias="userId", description="Authenticated user identifier")
    email: str = Field(..., description="User email address")
    full_name: str = Field(..., min_length=1, max_length=200, alias="fullName", description="User full name")
    company_name: str = Field(..., min_length=1, max_length=200, alias="companyName", description="New company name")

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, v.strip().lower()):
            raise ValueError('Invalid email format')
        return v.strip().lower()

    @field_validator('full_name', 'company_name')
    @classmethod
    def validate_not_blank(cls, v):
        if not v.strip():
            raise ValueError('Value cannot be blank')
        return v.strip()
