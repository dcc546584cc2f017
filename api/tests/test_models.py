# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Unit tests for Pydantic models.
"""

import pytest
from datetime import datetime
from pydantic import ValidationError
from bson import ObjectId

from models.entities import TeamMember, TeamPayment, CompanySettings, Company, UserRole
from models.enums import AutomationAction, PaymentStatus, Period
from models.requests import (
    AutomationQuery,
    MarkPaidRequest,
    CompanySettingsRequest,
    ReportQuery,
    PayablesQuery,
    SignupRequest
)
from models.responses import AutomationResults, AutomationResponse


class TestTeamMemberModel:
    """Test TeamMember model validation."""

    def test_valid_member(self):
        member = TeamMember(company_id=str(ObjectId()), name="  Ana Souza ", monthly_salary=3000)

        assert member.name == "Ana Souza"
        assert member.employment_type == "fixed"
        assert member.status == "active"
        assert member.payment_day is None
        assert ObjectId.is_valid(member.id)

    def test_empty_name_validation(self):
        with pytest.raises(ValidationError) as exc_info:
            TeamMember(company_id=str(ObjectId()), name="   ")

        assert "Member name cannot be empty" in str(exc_info.value)

    def test_negative_salary_rejected(self):
        with pytest.raises(ValidationError):
            TeamMember(company_id=str(ObjectId()), name="Ana", monthly_salary=-1)

    def test_from_document_converts_object_id(self):
        object_id = ObjectId()

        member = TeamMember.from_document({
            "_id": object_id,
            "company_id": "c1",
            "name": "Ana",
            "monthly_salary": 1000.0
        })

        assert member.id == str(object_id)


class TestTeamPaymentModel:
    """Test TeamPayment document mapping."""

    def test_to_document_uses_object_id(self):
        payment = TeamPayment(
            company_id="c1",
            payment_type="salary",
            amount=1000.0,
            reference_month=datetime(2024, 3, 1),
            due_date=datetime(2024, 4, 10)
        )

        document = payment.to_document()

        assert document["_id"] == ObjectId(payment.id)
        assert "id" not in document
        assert document["status"] == PaymentStatus.PENDING.value
        assert document["payment_type"] == "salary"

    def test_unknown_payment_type_rejected(self):
        with pytest.raises(ValidationError):
            TeamPayment(
                company_id="c1",
                payment_type="bonus",
                amount=1.0,
                reference_month=datetime(2024, 3, 1),
                due_date=datetime(2024, 4, 10)
            )

    def test_service_payment_without_reference_month(self):
        payment = TeamPayment.from_document({
            "_id": ObjectId(),
            "company_id": "c1",
            "payment_type": "service",
            "amount": 500,
            "reference_month": None,
            "due_date": datetime(2024, 3, 20)
        })

        assert payment.reference_month is None
        assert payment.amount == 500.0


class TestCompanyModels:
    """Test signup provisioning entities."""

    def test_company_defaults_and_document(self):
        company = Company(name=" Estúdio Ana ", email="Ana@Example.com")

        document = company.to_document()

        assert company.name == "Estúdio Ana"
        assert document["_id"] == ObjectId(company.id)
        assert document["email"] == "ana@example.com"
        assert document["status"] == "active"

    def test_company_requires_name(self):
        with pytest.raises(ValidationError):
            Company(name="  ", email="ana@example.com")

    def test_user_role_stores_role_value(self):
        role = UserRole(user_id="u1", role="admin", company_id="c1")

        assert role.model_dump()["role"] == "admin"

    def test_user_role_rejects_unknown_role(self):
        with pytest.raises(ValidationError):
            UserRole(user_id="u1", role="owner", company_id="c1")


class TestRequestModels:
    """Test request model validation."""

    def test_automation_action_defaults_to_all(self):
        assert AutomationQuery().action == AutomationAction.ALL.value

    def test_unrecognized_automation_action_is_kept(self):
        assert AutomationQuery(action="drop_all").action == "drop_all"

    def test_notes_are_optional_and_blank_is_none(self):
        assert MarkPaidRequest(company_id="c1").notes is None
        assert MarkPaidRequest(company_id="c1", notes="  ").notes is None
        assert MarkPaidRequest(company_id="c1", notes=" Pago via PIX ").notes == "Pago via PIX"

    def test_signup_request_accepts_camel_case(self):
        request = SignupRequest.model_validate({
            "userId": "u1",
            "email": " Ana@Example.com ",
            "fullName": "Ana Souza",
            "companyName": " Estúdio Ana "
        })

        assert request.user_id == "u1"
        assert request.email == "ana@example.com"
        assert request.company_name == "Estúdio Ana"

    def test_signup_request_rejects_invalid_email(self):
        with pytest.raises(ValidationError):
            SignupRequest(user_id="u1", email="not-an-email", full_name="Ana", company_name="Estúdio")

    def test_blank_payment_method_is_none(self):
        request = MarkPaidRequest(company_id="c1", payment_method="   ")

        assert request.payment_method is None

    def test_payment_method_is_stripped(self):
        assert MarkPaidRequest(company_id="c1", payment_method=" boleto ").payment_method == "boleto"

    @pytest.mark.parametrize("day", [0, 32])
    def test_settings_day_bounds(self, day):
        with pytest.raises(ValidationError):
            CompanySettingsRequest(default_payment_day=day)

        with pytest.raises(ValidationError):
            CompanySettings(company_id="c1", default_payment_day=day)

    def test_report_period_default(self):
        assert ReportQuery(company_id="c1").period == Period.THIRTY_DAYS

    def test_payables_query_defaults(self):
        query = PayablesQuery(company_id="c1")

        assert query.period == Period.THIRTY_DAYS
        assert query.kind is None


class TestResponseModels:
    """Test response serialization."""

    def test_automation_response_uses_camel_case(self):
        response = AutomationResponse(
            success=True,
            results=AutomationResults(salaries_generated=1, statuses_updated=4)
        )

        assert response.model_dump(by_alias=True) == {
            "success": True,
            "results": {"salariesGenerated": 1, "statusesUpdated": 4, "errors": []}
        }

    def test_results_accept_aliases(self):
        results = AutomationResults.model_validate({"salariesGenerated": 2, "statusesUpdated": 0})

        assert results.salaries_generated == 2
