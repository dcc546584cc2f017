# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Dashboard reports: period totals with a prior-period comparison.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type, Union
from opentelemetry import trace
from pydantic import ValidationError

from .mongodb import MongoDBService
from domain.date_ranges import (
    Comparison,
    DateRange,
    calculate_comparison_range,
    calculate_date_range,
    count_recurrence_in_period,
    format_comparison,
    get_date_range_filter
)
from models.entities import BaseEntity, CompanyExpense, TeamPayment
from models.enums import BillingCycle, PaymentStatus, PaymentType, Period

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class Metric:
    """One dashboard figure and its change against the prior period."""
    value: float
    comparison: Optional[Comparison] = None


@dataclass
class Report:
    """Metrics of one company over one period."""
    company_id: str
    period: str
    date_range: DateRange
    comparison_range: DateRange
    metrics: Dict[str, Metric] = field(default_factory=dict)


class ReportsService:
    """Aggregates team payments and company expenses for the dashboards."""

    def __init__(self, mongo_service: MongoDBService, clock: Optional[Callable[[], datetime]] = None):
        self.mongo_service = mongo_service
        self.clock = clock or datetime.utcnow

    def team_report(self, company_id: str, period: Union[Period, str]) -> Report:
        """Salary, service, paid, pending and overdue totals of team payments due in the period."""
        with tracer.start_as_current_span("reports.team") as span:
            span.set_attributes({"company.id": company_id, "report.period": str(getattr(period, "value", period))})
            return self._build_report(
                company_id,
                period,
                collection="team_payments",
                entity_class=TeamPayment,
                summarize=self._summarize_team_payments
            )

    def expense_report(self, company_id: str, period: Union[Period, str]) -> Report:
        """Expense totals due in the period, projecting open recurring expenses over the window."""
        with tracer.start_as_current_span("reports.expenses") as span:
            span.set_attributes({"company.id": company_id, "report.period": str(getattr(period, "value", period))})
            return self._build_report(
                company_id,
                period,
                collection="company_expenses",
                entity_class=CompanyExpense,
                summarize=self._summarize_expenses
            )

    def _build_report(self, company_id, period, collection, entity_class, summarize) -> Report:
        now = self.clock()
        token = getattr(period, "value", period)
        current_range = calculate_date_range(token, now)
        previous_range = calculate_comparison_range(current_range)

        current_docs = self._load(collection, entity_class, company_id, get_date_range_filter(token, now))
        current = summarize(current_docs, current_range)

        previous = None
        if not previous_range.is_unbounded:
            previous = summarize(self._load(collection, entity_class, company_id, previous_range), previous_range)

        report = Report(company_id, token, current_range, previous_range)
        for name, value in current.items():
            comparison = None
            if previous is not None:
                comparison = format_comparison(value, previous.get(name, 0.0), is_expense=True)
            report.metrics[name] = Metric(value, comparison)

        logger.debug(
            f"Built {collection} report for company {company_id}",
            extra={"extra_fields": {"period": token, "metrics": current}}
        )
        return report

    def _load(
        self,
        collection: str,
        entity_class: Type[BaseEntity],
        company_id: str,
        date_range: DateRange
    ) -> List[BaseEntity]:
        filters = None
        if not date_range.is_unbounded:
            filters = {"due_date": {"$gte": date_range.start, "$lte": date_range.end}}

        entities = []
        for document in self.mongo_service.find_by_company(collection, company_id, filters):
            try:
                entities.append(entity_class.from_document(document))
            except ValidationError as e:
                logger.warning(f"Skipping malformed {collection} document {document.get('id')}: {e}")
        return entities

    @staticmethod
    def _summarize_team_payments(payments: List[TeamPayment], date_range: DateRange) -> Dict[str, float]:
        totals = {"salaries": 0.0, "services": 0.0, "paid": 0.0, "pending": 0.0, "overdue": 0.0}

        for payment in payments:
            if payment.payment_type == PaymentType.SALARY.value:
                totals["salaries"] += payment.amount
            elif payment.payment_type == PaymentType.SERVICE.value:
                totals["services"] += payment.amount

            if payment.status in totals:
                totals[payment.status] += payment.amount

        return totals

    @staticmethod
    def _summarize_expenses(expenses: List[CompanyExpense], date_range: DateRange) -> Dict[str, float]:
        totals = {"total": 0.0, "recurring": 0.0, "paid": 0.0, "pending": 0.0, "overdue": 0.0}

        for expense in expenses:
            if expense.status == PaymentStatus.CANCELLED.value:
                continue

            if expense.status == PaymentStatus.PAID.value:
                occurrences = 1
            else:
                occurrences = count_recurrence_in_period(expense.billing_cycle, date_range.start, date_range.end)
            amount = expense.amount * occurrences

            totals["total"] += amount
            if expense.status in totals:
                totals[expense.status] += amount
            if expense.billing_cycle != BillingCycle.ONE_TIME.value and expense.status != PaymentStatus.PAID.value:
                totals["recurring"] += amount

        return totals
