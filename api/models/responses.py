# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Response models for API endpoints.
"""

from typing import List, Optional, Dict
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime


class AutomationResults(BaseModel):
    """Aggregated outcome of a team automation run."""

    model_config = ConfigDict(populate_by_name=True)

    salaries_generated: int = Field(default=0, alias="salariesGenerated", description="Salary payments created")
    statuses_updated: int = Field(default=0, alias="statusesUpdated", description="Payables marked overdue")
    errors: List[str] = Field(default_factory=list, description="Recovered per-item errors")


class AutomationResponse(BaseModel):
    """Team automation endpoint response."""

    success: bool = Field(..., description="Whether the run completed")
    results: AutomationResults = Field(..., description="Run results")


class ErrorResponse(BaseModel):
    """Error response returned by every endpoint."""

    success: bool = Field(default=False, description="Always false")
    error: str = Field(..., description="Error message")
    details: Optional[List[Dict]] = Field(None, description="Field validation errors")


class PayableResponse(BaseModel):
    """Payable state after a lifecycle transition."""

    id: str = Field(..., description="Payable identifier")
    kind: str = Field(..., description="Collection holding the payable")
    company_id: str = Field(..., description="Company identifier")
    status: str = Field(..., description="Lifecycle status")
    paid_date: Optional[datetime] = Field(None, description="Settlement date")
    payment_method: Optional[str] = Field(None, description="Payment method")
    notes: Optional[str] = Field(None, description="Payment notes")


class CompanySettingsResponse(BaseModel):
    """Company settings as seen by the team automation."""

    company_id: str = Field(..., description="Company identifier")
    default_payment_day: int = Field(..., description="Effective fallback payment day")
    is_default: bool = Field(..., description="True when no company value is stored")


class DateRangeResponse(BaseModel):
    """Concrete bounds of a reporting period."""

    start: Optional[datetime] = Field(None, description="Inclusive start, null for all time")
    end: Optional[datetime] = Field(None, description="End, null for all time")


class ComparisonResponse(BaseModel):
    """Period-over-period comparison of one metric."""

    previous: float = Field(..., description="Value in the prior period")
    percent_change: float = Field(..., description="Signed percent change")
    direction: str = Field(..., description="up, down or flat")
    tone: str = Field(..., description="positive, negative, warning or neutral")
    text: str = Field(..., description="pt-BR label")


class MetricResponse(BaseModel):
    """Single dashboard metric."""

    value: float = Field(..., description="Metric value")
    formatted: str = Field(..., description="pt-BR currency text")
    comparison: Optional[ComparisonResponse] = Field(None, description="Prior period comparison")


class ReportResponse(BaseModel):
    """Dashboard report for one period."""

    company_id: str = Field(..., description="Company identifier")
    period: str = Field(..., description="Period token")
    range: DateRangeResponse = Field(..., description="Current period bounds")
    comparison_range: DateRangeResponse = Field(..., description="Prior period bounds")
    metrics: Dict[str, MetricResponse] = Field(default_factory=dict, description="Metrics by name")


class PayableItemResponse(BaseModel):
    """Open payable due inside the listing window."""

    id: str = Field(..., description="Payable identifier")
    kind: str = Field(..., description="Collection holding the payable")
    description: str = Field(..., description="Payable description")
    amount: float = Field(..., description="Amount in BRL")
    formatted: str = Field(..., description="pt-BR currency text")
    status: str = Field(..., description="pending or overdue")
    due_date: Optional[datetime] = Field(None, description="Due or scheduled payment date")


class PayablesListResponse(BaseModel):
    """Open payables of a company within a forward window."""

    company_id: str = Field(..., description="Company identifier")
    period: str = Field(..., description="Period token")
    range: DateRangeResponse = Field(..., description="Listing window bounds")
    total: float = Field(..., description="Sum of listed amounts")
    items: List[PayableItemResponse] = Field(default_factory=list, description="Payables ordered by due date")


class SignupResponse(BaseModel):
    """Outcome of provisioning a signed-up user."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, description="Whether provisioning completed")
    company_id: str = Field(..., alias="companyId", description="Created company identifier")
    message: str = Field(default="User setup completed successfully", description="Outcome message")
