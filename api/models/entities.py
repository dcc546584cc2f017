# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Core entity models for the Domous OS platform.
"""

from datetime import datetime
from typing import Optional
import re
from pydantic import BaseModel, ConfigDict, Field, field_validator
from bson import ObjectId
from .base import BaseEntity, generate_object_id
from .enums import (
    PaymentStatus,
    PaymentType,
    EmploymentType,
    MemberStatus,
    BillingCycle,
    CompanyStatus,
    AppRole
)


class TeamMember(BaseEntity):
    """Team member on the company payroll."""

    name: str = Field(..., min_length=1, max_length=200, description="Member full name")
    monthly_salary: Optional[float] = Field(None, ge=0, description="Fixed monthly salary")
    payment_day: Optional[int] = Field(None, description="Preferred day of month for payment")
    employment_type: EmploymentType = Field(default=EmploymentType.FIXED, description="Employment type")
    status: MemberStatus = Field(default=MemberStatus.ACTIVE, description="Member status")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Validate member name."""
        if not v.strip():
            raise ValueError('Member name cannot be empty')
        return v.strip()


class PayableEntity(BaseEntity):
    """Common lifecycle fields of payments, commissions and expenses."""

    status: PaymentStatus = Field(default=PaymentStatus.PENDING, description="Lifecycle status")
    paid_date: Optional[datetime] = Field(None, description="When the obligation was settled")
    payment_method: Optional[str] = Field(None, max_length=50, description="How it was paid")
    notes: Optional[str] = Field(None, max_length=1000, description="Free-form payment notes")

    def is_paid(self) -> bool:
        """Check if the obligation was settled."""
        return self.status == PaymentStatus.PAID


class TeamPayment(PayableEntity):
    """Salary or service payment owed to a team member."""

    team_member_id: Optional[str] = Field(None, description="Member this payment belongs to")
    payment_type: PaymentType = Field(..., description="Salary or service payment")
    description: str = Field(default="", max_length=500, description="Payment description")
    amount: float = Field(..., ge=0, description="Amount due")
    salary_snapshot: Optional[float] = Field(None, description="Salary at generation time")
    reference_month: Optional[datetime] = Field(None, description="First day of the month this payment covers")
    due_date: datetime = Field(..., description="When the payment is due")


class PartnerCommission(PayableEntity):
    """Commission owed to a partner for a client invoice."""

    partner_id: str = Field(..., description="Partner receiving the commission")
    commission_amount: float = Field(..., ge=0, description="Commission amount")
    reference_month: Optional[datetime] = Field(None, description="Month the commission refers to")
    scheduled_payment_date: Optional[datetime] = Field(None, description="When the commission is due")


class CompanyExpense(PayableEntity):
    """Operational expense of the company."""

    description: str = Field(..., min_length=1, max_length=500, description="Expense description")
    amount: float = Field(..., ge=0, description="Amount per occurrence")
    billing_cycle: BillingCycle = Field(default=BillingCycle.ONE_TIME, description="Recurrence")
    category: Optional[str] = Field(None, max_length=100, description="Expense category")
    due_date: datetime = Field(..., description="When the expense is due")


class CompanySettings(BaseModel):
    """Company-level defaults used by the team automation."""

    model_config = ConfigDict(populate_by_name=True)

    company_id: str = Field(..., description="Company identifier")
    default_payment_day: Optional[int] = Field(None, ge=1, le=31, description="Fallback payment day")


class Company(BaseModel):
    """Company account created when a user signs up."""

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=generate_object_id, description="Unique identifier")
    name: str = Field(..., min_length=1, max_length=200, description="Company name")
    email: str = Field(..., description="Contact email")
    status: CompanyStatus = Field(default=CompanyStatus.ACTIVE, description="Account status")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Creation timestamp")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Company name cannot be empty')
        return v.strip()

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        """Validate email format."""
        email_pattern = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
        if not re.match(email_pattern, v.strip().lower()):
            raise ValueError('Invalid email format')
        return v.strip().lower()

    def to_document(self):
        data = self.model_dump(exclude={"id"})
        data["_id"] = ObjectId(self.id)
        return data


class UserRole(BaseModel):
    """Role held by a user in a company."""

    model_config = ConfigDict(use_enum_values=True)

    user_id: str = Field(..., min_length=1, description="User identifier")
    role: AppRole = Field(..., description="Granted role")
    company_id: str = Field(..., description="Company the role applies to")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Grant timestamp")
