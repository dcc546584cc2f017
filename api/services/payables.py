# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Payable lifecycle operations and company payment settings.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple, Type, Union
from opentelemetry import trace
from pydantic import ValidationError

from .mongodb import MongoDBService
from domain.date_ranges import DateRange, calculate_future_date_range
from domain.payments import (
    DEFAULT_PAYMENT_DAY,
    OVERDUE_TARGETS,
    InvalidTransitionError,
    ensure_transition,
    statuses_allowing
)
from models.entities import (
    CompanyExpense,
    CompanySettings,
    PartnerCommission,
    PayableEntity,
    TeamPayment
)
from models.enums import PayableKind, PaymentStatus, Period

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

ENTITY_BY_KIND: Dict[str, Type[PayableEntity]] = {
    PayableKind.TEAM_PAYMENTS.value: TeamPayment,
    PayableKind.PARTNER_COMMISSIONS.value: PartnerCommission,
    PayableKind.COMPANY_EXPENSES.value: CompanyExpense,
}


class PayableNotFoundError(LookupError):
    """Raised when a payable does not exist within the company."""

    def __init__(self, kind: str, payable_id: str):
        super().__init__(f"{kind} item {payable_id} not found")
        self.kind = kind
        self.payable_id = payable_id


@dataclass
class PayableItem:
    """Open obligation as shown in the payables listing."""
    id: str
    kind: str
    description: str
    amount: float
    status: str
    due_date: Optional[datetime]


@dataclass
class PayablesListing:
    """Open payables of a company within a forward window."""
    company_id: str
    period: str
    date_range: DateRange
    items: List[PayableItem] = field(default_factory=list)

    @property
    def total(self) -> float:
        return sum(item.amount for item in self.items)


class PayablesService:
    """Explicit user actions on payables plus the company payment settings."""

    settings_collection = "company_settings"
    open_statuses = [PaymentStatus.PENDING.value, PaymentStatus.OVERDUE.value]

    def __init__(self, mongo_service: MongoDBService, clock: Optional[Callable[[], datetime]] = None):
        self.mongo_service = mongo_service
        self.clock = clock or datetime.utcnow
        logger.info("Payables service initialized")

    def mark_paid(
        self,
        kind: Union[PayableKind, str],
        company_id: str,
        payable_id: str,
        paid_date: Optional[datetime] = None,
        payment_method: Optional[str] = None,
        notes: Optional[str] = None
    ) -> PayableEntity:
        """
        Settle a pending or overdue payable.

        Raises:
            PayableNotFoundError: If the payable is not in this company
            InvalidTransitionError: If the payable is already paid or cancelled
            ValidationError: If the stored document cannot be read as a payable;
                nothing is written in that case
        """
        kind = PayableKind(kind).value
        entity_class = ENTITY_BY_KIND[kind]

        with tracer.start_as_current_span("payables.mark_paid") as span:
            span.set_attributes({
                "payable.kind": kind,
                "payable.id": payable_id,
                "company.id": company_id
            })

            document = self.mongo_service.find_one_by_company(kind, company_id, payable_id)
            if document is None:
                raise PayableNotFoundError(kind, payable_id)

            current_status = document.get("status", PaymentStatus.PENDING.value)
            ensure_transition(current_status, PaymentStatus.PAID)

            updates = {
                "status": PaymentStatus.PAID.value,
                "paid_date": paid_date or datetime.utcnow()
            }
            if payment_method:
                updates["payment_method"] = payment_method
            if notes:
                updates["notes"] = notes

            payable = entity_class.from_document({**document, **updates})

            # Only applies while the status still allows payment
            updated = self.mongo_service.update_one_by_company(
                kind,
                company_id,
                payable_id,
                updates,
                filters={"status": {"$in": statuses_allowing(PaymentStatus.PAID)}}
            )
            if not updated:
                raise InvalidTransitionError(current_status, PaymentStatus.PAID.value)

            logger.info(
                "Payable marked as paid",
                extra={
                    "extra_fields": {
                        "kind": kind,
                        "payable_id": payable_id,
                        "company_id": company_id,
                        "previous_status": current_status
                    }
                }
            )

            return payable

    def list_open(
        self,
        company_id: str,
        period: Union[Period, str] = Period.THIRTY_DAYS,
        kind: Union[PayableKind, str, None] = None
    ) -> PayablesListing:
        """
        List pending and overdue payables falling due within the period ahead.

        ``all`` lists every open payable regardless of its date. Documents that
        cannot be read are skipped and logged.
        """
        token = getattr(period, "value", period)
        kind = getattr(kind, "value", kind)
        date_range = calculate_future_date_range(token, self.clock())
        listing = PayablesListing(company_id, token, date_range)

        with tracer.start_as_current_span("payables.list_open") as span:
            span.set_attributes({"company.id": company_id, "payables.period": token})

            for target in OVERDUE_TARGETS:
                if kind and target.collection != kind:
                    continue

                filters = {"status": {"$in": self.open_statuses}}
                if not date_range.is_unbounded:
                    filters[target.date_field] = {"$gte": date_range.start, "$lte": date_range.end}

                entity_class = ENTITY_BY_KIND[target.collection]
                for document in self.mongo_service.find_by_company(target.collection, company_id, filters):
                    try:
                        payable = entity_class.from_document(document)
                    except ValidationError as e:
                        logger.warning(f"Skipping malformed {target.collection} document {document.get('id')}: {e}")
                        continue
                    listing.items.append(self._to_item(target.collection, target.date_field, payable))

            listing.items.sort(key=lambda item: (item.due_date is None, item.due_date or datetime.min))
            span.set_attribute("payables.count", len(listing.items))

        return listing

    @staticmethod
    def _to_item(kind: str, date_field: str, payable: PayableEntity) -> PayableItem:
        if isinstance(payable, PartnerCommission):
            amount = payable.commission_amount
            description = "Comissão de parceiro"
        else:
            amount = payable.amount
            description = payable.description

        return PayableItem(
            id=payable.id,
            kind=kind,
            description=description,
            amount=amount,
            status=payable.status,
            due_date=getattr(payable, date_field)
        )

    def get_settings(self, company_id: str) -> Tuple[CompanySettings, bool]:
        """
        Return the company settings and whether the default payment day is the built-in one.
        """
        document = self.mongo_service.get_collection(self.settings_collection).find_one(
            {"company_id": company_id}
        )
        settings = CompanySettings(
            company_id=company_id,
            default_payment_day=(document or {}).get("default_payment_day")
        )

        if settings.default_payment_day is None:
            return settings.model_copy(update={"default_payment_day": DEFAULT_PAYMENT_DAY}), True
        return settings, False

    def update_settings(self, company_id: str, default_payment_day: int) -> CompanySettings:
        """Create or update the company's default payment day."""
        settings = CompanySettings(company_id=company_id, default_payment_day=default_payment_day)

        self.mongo_service.get_collection(self.settings_collection).update_one(
            {"company_id": company_id},
            {
                "$set": {
                    "default_payment_day": settings.default_payment_day,
                    "updated_at": datetime.utcnow()
                },
                "$setOnInsert": {"created_at": datetime.utcnow()}
            },
            upsert=True
        )

        logger.info(
            "Company settings updated",
            extra={"extra_fields": {"company_id": company_id, "default_payment_day": default_payment_day}}
        )
        return settings
