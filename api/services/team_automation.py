# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Team automation batch: monthly salary generation and the overdue sweep.

Each run is stateless and completes within a single request. Failures are
collected per member (salaries) or per collection (sweep) and reported in
aggregate; one failure never aborts the rest of the batch.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Union
from opentelemetry import trace
from pydantic import ValidationError
from pymongo.errors import DuplicateKeyError

from .mongodb import MongoDBService
from domain.payments import (
    OVERDUE_TARGETS,
    build_salary_payment,
    is_salary_eligible,
    overdue_filter,
    reference_month_for,
    resolve_payment_day,
    salary_payment_key
)
from models.entities import CompanySettings, TeamMember, TeamPayment
from models.enums import AutomationAction, EmploymentType, MemberStatus, PaymentStatus
from models.responses import AutomationResults

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


@dataclass
class GenerationResult:
    """Outcome of one salary generation pass."""
    generated: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass
class SweepResult:
    """Outcome of one overdue sweep, per collection."""
    updated_by_collection: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(self.updated_by_collection.values())


class TeamAutomationService:
    """Generates recurring salary payments and marks past-due payables as overdue."""

    members_collection = "team_members"
    payments_collection = "team_payments"
    settings_collection = "company_settings"

    def __init__(self, mongo_service: MongoDBService, clock: Optional[Callable[[], datetime]] = None):
        self.mongo_service = mongo_service
        self.clock = clock or datetime.utcnow
        logger.info("Team automation service initialized")

    def run(self, action: Union[AutomationAction, str] = AutomationAction.ALL) -> AutomationResults:
        """
        Run the requested automation phases.

        Any other action runs no phase and reports zero counts.

        Args:
            action: ``all`` (both phases), ``generate_salaries`` or ``update_overdue``

        Returns:
            AutomationResults with generated salaries, updated statuses and errors
        """
        action = getattr(action, "value", action)
        now = self.clock()
        results = AutomationResults()

        if action not in {member.value for member in AutomationAction}:
            logger.warning(
                "Unrecognized automation action, nothing to run",
                extra={"extra_fields": {"action": action}}
            )

        with tracer.start_as_current_span("team_automation.run") as span:
            span.set_attribute("automation.action", action)

            if action in (AutomationAction.ALL.value, AutomationAction.GENERATE_SALARIES.value):
                generation = self.generate_salaries(now)
                results.salaries_generated = generation.generated
                results.errors.extend(generation.errors)

            if action in (AutomationAction.ALL.value, AutomationAction.UPDATE_OVERDUE.value):
                sweep = self.update_overdue_statuses(now)
                results.statuses_updated = sweep.total
                results.errors.extend(sweep.errors)

            span.set_attributes({
                "automation.salaries_generated": results.salaries_generated,
                "automation.statuses_updated": results.statuses_updated,
                "automation.errors": len(results.errors)
            })

        logger.info(
            "Team automation finished",
            extra={
                "extra_fields": {
                    "action": action,
                    "salaries_generated": results.salaries_generated,
                    "statuses_updated": results.statuses_updated,
                    "errors": results.errors
                }
            }
        )
        return results

    # Salary generation

    def generate_salaries(self, now: Optional[datetime] = None) -> GenerationResult:
        """
        Create this month's pending salary payment for every eligible member.

        Members that already have a salary payment for the reference month are
        skipped, so re-running is a no-op for them.
        """
        now = now or self.clock()
        reference_month = reference_month_for(now)
        result = GenerationResult()

        with tracer.start_as_current_span("team_automation.generate_salaries") as span:
            span.set_attribute("payroll.reference_month", reference_month.strftime("%Y-%m"))

            try:
                member_docs = list(
                    self.mongo_service.get_collection(self.members_collection).find({
                        "employment_type": EmploymentType.FIXED.value,
                        "status": MemberStatus.ACTIVE.value,
                        "monthly_salary": {"$gt": 0}
                    })
                )
                company_defaults = self._load_company_defaults(
                    doc.get("company_id") for doc in member_docs
                )
            except Exception as e:
                span.record_exception(e)
                logger.error(f"Failed to load team members: {e}", exc_info=True)
                result.errors.append(f"Membros: {e}")
                return result

            logger.info(
                f"Found {len(member_docs)} fixed-salary members",
                extra={"extra_fields": {"reference_month": reference_month.isoformat()}}
            )

            for member_doc in member_docs:
                self._generate_for_member(member_doc, reference_month, company_defaults, result)

            span.set_attributes({
                "payroll.generated": result.generated,
                "payroll.skipped": result.skipped,
                "payroll.errors": len(result.errors)
            })

        return result

    def _load_company_defaults(self, company_ids: Iterable[Optional[str]]) -> Dict[str, Optional[int]]:
        """Map company IDs to their configured default payment day."""
        ids = sorted({company_id for company_id in company_ids if company_id})
        if not ids:
            return {}

        cursor = self.mongo_service.get_collection(self.settings_collection).find(
            {"company_id": {"$in": ids}},
            {"company_id": 1, "default_payment_day": 1}
        )
        defaults = {}
        for doc in cursor:
            try:
                settings = CompanySettings.model_validate(doc)
            except ValidationError as e:
                logger.warning(
                    f"Ignoring invalid company settings: {e.errors()[0]['msg']}",
                    extra={"extra_fields": {"company_id": doc.get("company_id")}}
                )
                continue
            defaults[settings.company_id] = settings.default_payment_day
        return defaults

    def _generate_for_member(
        self,
        member_doc: Dict,
        reference_month: datetime,
        company_defaults: Dict[str, Optional[int]],
        result: GenerationResult
    ) -> None:
        name = member_doc.get("name") or str(member_doc.get("_id"))

        try:
            member = TeamMember.from_document(member_doc)
            if not is_salary_eligible(member):
                result.skipped += 1
                return

            resolution = resolve_payment_day(member.payment_day, company_defaults.get(member.company_id))
            payment = build_salary_payment(member, reference_month, resolution)
            inserted = self._insert_salary(payment)

        except DuplicateKeyError:
            # A concurrent run inserted the same salary first
            inserted = False
        except Exception as e:
            logger.error(
                f"Failed to generate salary for {name}: {e}",
                extra={"extra_fields": {"member_id": str(member_doc.get("_id"))}}
            )
            result.errors.append(f"{name}: {e}")
            return

        if inserted:
            result.generated += 1
            logger.info(
                f"Salary generated for {name}",
                extra={
                    "extra_fields": {
                        "member_id": member.id,
                        "amount": payment.amount,
                        "due_date": payment.due_date.isoformat(),
                        "payment_day_source": resolution.source
                    }
                }
            )
        else:
            result.skipped += 1
            logger.info(f"Salary already exists for {name}")

    def _insert_salary(self, payment: TeamPayment) -> bool:
        """Insert the payment unless its member already has one for the month."""
        collection = self.mongo_service.get_collection(self.payments_collection)
        update_result = collection.update_one(
            salary_payment_key(payment),
            {"$setOnInsert": payment.to_document()},
            upsert=True
        )
        return update_result.upserted_id is not None

    # Overdue sweep

    def update_overdue_statuses(self, now: Optional[datetime] = None) -> SweepResult:
        """Mark pending, unpaid obligations past their due date as overdue."""
        now = now or self.clock()
        result = SweepResult()

        with tracer.start_as_current_span("team_automation.update_overdue") as span:
            for target in OVERDUE_TARGETS:
                try:
                    update_result = self.mongo_service.get_collection(target.collection).update_many(
                        overdue_filter(target.date_field, now),
                        {"$set": {"status": PaymentStatus.OVERDUE.value, "updated_at": now}}
                    )
                except Exception as e:
                    span.record_exception(e)
                    logger.error(f"Failed to update {target.collection}: {e}")
                    result.errors.append(f"{target.label}: {e}")
                    continue

                result.updated_by_collection[target.collection] = update_result.modified_count
                logger.info(
                    f"{update_result.modified_count} documents marked overdue in {target.collection}"
                )

            span.set_attribute("overdue.total", result.total)

        return result
