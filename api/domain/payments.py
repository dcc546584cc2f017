# SPDX-License-Identifier: Apache-2.0

"""
Payable lifecycle and salary generation rules.

This module contains pure functions deciding which team members are owed a
salary for a month, when that salary is due and which lifecycle transitions
a payable-like document (team payment, partner commission, company expense)
may go through. Storage and logging live in ``services``.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from domain.date_ranges import add_months
from models.entities import TeamMember, TeamPayment
from models.enums import (
    EmploymentType,
    MemberStatus,
    PaymentStatus,
    PaymentType,
    PayableKind
)

DEFAULT_PAYMENT_DAY = 10
MIN_PAYMENT_DAY = 1
MAX_PAYMENT_DAY = 31

SOURCE_MEMBER = "member"
SOURCE_COMPANY = "company"
SOURCE_DEFAULT = "default"

# paid and cancelled are terminal
ALLOWED_TRANSITIONS = {
    PaymentStatus.PENDING.value: {PaymentStatus.PAID.value, PaymentStatus.OVERDUE.value},
    PaymentStatus.OVERDUE.value: {PaymentStatus.PAID.value},
    PaymentStatus.PAID.value: set(),
    PaymentStatus.CANCELLED.value: set(),
}


@dataclass(frozen=True)
class PaymentDayResolution:
    """Payment day picked for a member and the tier it came from."""
    day: int
    source: str


@dataclass(frozen=True)
class OverdueTarget:
    """Collection swept for overdue obligations and its due date field."""
    collection: str
    date_field: str
    label: str


OVERDUE_TARGETS = (
    OverdueTarget(PayableKind.TEAM_PAYMENTS.value, "due_date", "Team payments"),
    OverdueTarget(PayableKind.PARTNER_COMMISSIONS.value, "scheduled_payment_date", "Partner commissions"),
    OverdueTarget(PayableKind.COMPANY_EXPENSES.value, "due_date", "Expenses"),
)


class InvalidTransitionError(ValueError):
    """Raised when a payable cannot move to the requested status."""

    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot change status from '{current}' to '{target}'")
        self.current = current
        self.target = target


def _is_valid_day(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and MIN_PAYMENT_DAY <= value <= MAX_PAYMENT_DAY
    )


def resolve_payment_day(
    member_day: Optional[int],
    company_default_day: Optional[int]
) -> PaymentDayResolution:
    """
    Pick the day of month a salary is paid on.

    Precedence is the member's own ``payment_day``, then the company's
    ``default_payment_day``, then ``DEFAULT_PAYMENT_DAY``. A tier is skipped
    when its value is missing or outside 1..31.
    """
    if _is_valid_day(member_day):
        return PaymentDayResolution(member_day, SOURCE_MEMBER)
    if _is_valid_day(company_default_day):
        return PaymentDayResolution(company_default_day, SOURCE_COMPANY)
    return PaymentDayResolution(DEFAULT_PAYMENT_DAY, SOURCE_DEFAULT)


def reference_month_for(now: datetime) -> datetime:
    """First day of the month containing ``now``, at midnight."""
    return datetime(now.year, now.month, 1)


def compute_due_date(reference_month: datetime, payment_day: int) -> datetime:
    """
    Due date of a salary: ``payment_day`` of the month after ``reference_month``.

    Days past the end of that month are clamped to its last day.
    """
    next_month = add_months(reference_month_for(reference_month), 1)
    last_day = calendar.monthrange(next_month.year, next_month.month)[1]
    return datetime(next_month.year, next_month.month, min(payment_day, last_day))


def is_salary_eligible(member: TeamMember) -> bool:
    """Only active fixed-salary members with a positive salary are paid automatically."""
    return (
        member.employment_type == EmploymentType.FIXED.value
        and member.status == MemberStatus.ACTIVE.value
        and member.monthly_salary is not None
        and member.monthly_salary > 0
    )


def salary_description(name: str, reference_month: datetime) -> str:
    return f"Salário - {name} ({reference_month:%m/%Y})"


def build_salary_payment(
    member: TeamMember,
    reference_month: datetime,
    resolution: PaymentDayResolution
) -> TeamPayment:
    """
    Build the pending salary payment owed to ``member`` for ``reference_month``.

    The amount is a snapshot of the salary on the member record that was
    scanned, so later salary edits do not alter generated payments.
    """
    return TeamPayment(
        company_id=member.company_id,
        team_member_id=member.id,
        payment_type=PaymentType.SALARY,
        description=salary_description(member.name, reference_month),
        amount=member.monthly_salary,
        salary_snapshot=member.monthly_salary,
        reference_month=reference_month,
        due_date=compute_due_date(reference_month, resolution.day),
        status=PaymentStatus.PENDING
    )


def salary_payment_key(payment: TeamPayment) -> Dict[str, Any]:
    """Natural key of a salary payment; at most one document may match it."""
    return {
        "team_member_id": payment.team_member_id,
        "reference_month": payment.reference_month,
        "payment_type": PaymentType.SALARY.value,
    }


def overdue_filter(date_field: str, now: datetime) -> Dict[str, Any]:
    """Query matching pending, unpaid obligations whose due date has passed."""
    return {
        "status": PaymentStatus.PENDING.value,
        date_field: {"$lt": now},
        "paid_date": None,
    }


def can_transition(current: Union[PaymentStatus, str], target: Union[PaymentStatus, str]) -> bool:
    current = getattr(current, "value", current)
    target = getattr(target, "value", target)
    return target in ALLOWED_TRANSITIONS.get(current, set())


def ensure_transition(current: Union[PaymentStatus, str], target: Union[PaymentStatus, str]) -> None:
    """Raise InvalidTransitionError unless ``current -> target`` is allowed."""
    if not can_transition(current, target):
        raise InvalidTransitionError(
            getattr(current, "value", current),
            getattr(target, "value", target)
        )


def statuses_allowing(target: Union[PaymentStatus, str]) -> List[str]:
    """Statuses from which ``target`` can be reached, in a stable order."""
    target = getattr(target, "value", target)
    return [
        status for status, targets in ALLOWED_TRANSITIONS.items()
        if target in targets
    ]
