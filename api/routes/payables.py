# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Payable lifecycle and company payment settings endpoints.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
import logging

from domain.date_ranges import format_brl
from domain.payments import InvalidTransitionError
from models.requests import CompanyPath, CompanySettingsRequest, MarkPaidRequest, PayablePath, PayablesQuery
from models.responses import (
    CompanySettingsResponse,
    DateRangeResponse,
    ErrorResponse,
    PayableItemResponse,
    PayableResponse,
    PayablesListResponse
)
from middleware.error_handler import ConflictException, NotFoundException
from services.payables import PayableNotFoundError

# Set up logging
logger = logging.getLogger(__name__)

payables_tag = Tag(name="Payables", description="Team payments, partner commissions and expenses")
payables_bp = APIBlueprint(
    'payables',
    __name__,
    url_prefix='/api/payables',
    abp_tags=[payables_tag]
)

settings_tag = Tag(name="Company Settings", description="Company payment defaults")
settings_bp = APIBlueprint(
    'company_settings',
    __name__,
    url_prefix='/api/companies',
    abp_tags=[settings_tag]
)


@payables_bp.get('', responses={"200": PayablesListResponse})
def list_open_payables(query: PayablesQuery):
    """
    List pending and overdue payables due within the period ahead.

    ``kind`` restricts the listing to one collection; ``period=all`` ignores dates.
    """
    listing = current_app.payables_service.list_open(query.company_id, query.period, query.kind)

    response = PayablesListResponse(
        company_id=listing.company_id,
        period=listing.period,
        range=DateRangeResponse(start=listing.date_range.start, end=listing.date_range.end),
        total=round(listing.total, 2),
        items=[
            PayableItemResponse(
                id=item.id,
                kind=item.kind,
                description=item.description,
                amount=item.amount,
                formatted=format_brl(item.amount),
                status=item.status,
                due_date=item.due_date
            )
            for item in listing.items
        ]
    )
    return jsonify(response.model_dump(mode="json")), 200


@payables_bp.post(
    '/<string:kind>/<string:payable_id>/pay',
    responses={"200": PayableResponse, "404": ErrorResponse, "409": ErrorResponse}
)
def mark_payable_paid(path: PayablePath, body: MarkPaidRequest):
    """
    Mark a payable as paid.

    Pending and overdue items can be paid; paid and cancelled items are final.
    """
    try:
        payable = current_app.payables_service.mark_paid(
            path.kind,
            body.company_id,
            path.payable_id,
            paid_date=body.paid_date,
            payment_method=body.payment_method,
            notes=body.notes
        )
    except PayableNotFoundError as e:
        raise NotFoundException(str(e))
    except InvalidTransitionError as e:
        logger.info(f"Rejected payment of {path.kind.value} {path.payable_id}: {e}")
        raise ConflictException(str(e))

    response = PayableResponse(
        id=payable.id,
        kind=path.kind.value,
        company_id=payable.company_id,
        status=payable.status,
        paid_date=payable.paid_date,
        payment_method=payable.payment_method,
        notes=payable.notes
    )
    return jsonify(response.model_dump(mode="json")), 200


@settings_bp.get('/<string:company_id>/settings', responses={"200": CompanySettingsResponse})
def get_company_settings(path: CompanyPath):
    """Get the company's default payment day."""
    settings, is_default = current_app.payables_service.get_settings(path.company_id)

    response = CompanySettingsResponse(
        company_id=settings.company_id,
        default_payment_day=settings.default_payment_day,
        is_default=is_default
    )
    return jsonify(response.model_dump(mode="json")), 200


@settings_bp.put('/<string:company_id>/settings', responses={"200": CompanySettingsResponse})
def update_company_settings(path: CompanyPath, body: CompanySettingsRequest):
    """Set the company's default payment day (1 to 31)."""
    settings = current_app.payables_service.update_settings(path.company_id, body.default_payment_day)

    response = CompanySettingsResponse(
        company_id=settings.company_id,
        default_payment_day=settings.default_payment_day,
        is_default=False
    )
    return jsonify(response.model_dump(mode="json")), 200
