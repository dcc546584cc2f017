# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the payables, company settings, reports and health endpoints.
"""

import json
import pytest
from datetime import datetime
from bson import ObjectId


@pytest.fixture
def payment_document(company_id):
    return {
        "id": str(ObjectId()),
        "company_id": company_id,
        "team_member_id": str(ObjectId()),
        "payment_type": "service",
        "description": "Design do site",
        "amount": 1200.0,
        "reference_month": datetime(2024, 3, 1),
        "due_date": datetime(2024, 3, 20),
        "status": "pending"
    }


class TestMarkPaidEndpoint:
    """Test cases for /api/payables/<kind>/<id>/pay."""

    def test_marks_payment_as_paid(self, client, mock_mongodb_service, company_id, payment_document):
        mock_mongodb_service.find_one_by_company.return_value = payment_document
        mock_mongodb_service.update_one_by_company.return_value = True

        response = client.post(
            f"/api/payables/team_payments/{payment_document['id']}/pay",
            json={"company_id": company_id, "paid_date": "2024-03-18T09:00:00", "payment_method": "pix"}
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["id"] == payment_document["id"]
        assert data["kind"] == "team_payments"
        assert data["status"] == "paid"
        assert data["paid_date"].startswith("2024-03-18T09:00:00")
        assert data["payment_method"] == "pix"

    def test_notes_are_persisted_and_returned(self, client, mock_mongodb_service, company_id, payment_document):
        mock_mongodb_service.find_one_by_company.return_value = payment_document
        mock_mongodb_service.update_one_by_company.return_value = True

        response = client.post(
            f"/api/payables/team_payments/{payment_document['id']}/pay",
            json={"company_id": company_id, "notes": "Comprovante enviado por e-mail"}
        )

        assert response.status_code == 200
        assert json.loads(response.data)["notes"] == "Comprovante enviado por e-mail"
        updates = mock_mongodb_service.update_one_by_company.call_args[0][3]
        assert updates["notes"] == "Comprovante enviado por e-mail"

    def test_missing_payable_returns_404(self, client, mock_mongodb_service, company_id):
        mock_mongodb_service.find_one_by_company.return_value = None

        response = client.post(
            f"/api/payables/company_expenses/{ObjectId()}/pay",
            json={"company_id": company_id}
        )

        assert response.status_code == 404
        data = json.loads(response.data)
        assert data["success"] is False
        assert "not found" in data["error"]

    def test_already_paid_returns_409(self, client, mock_mongodb_service, company_id, payment_document):
        payment_document["status"] = "paid"
        mock_mongodb_service.find_one_by_company.return_value = payment_document

        response = client.post(
            f"/api/payables/team_payments/{payment_document['id']}/pay",
            json={"company_id": company_id}
        )

        assert response.status_code == 409
        assert json.loads(response.data)["success"] is False
        mock_mongodb_service.update_one_by_company.assert_not_called()

    def test_unknown_kind_is_rejected(self, client, company_id):
        response = client.post(f"/api/payables/invoices/{ObjectId()}/pay", json={"company_id": company_id})

        assert response.status_code == 422


class TestOpenPayablesEndpoint:
    """Test cases for /api/payables."""

    def test_lists_open_payables(self, client, mock_mongodb_service, company_id, payment_document):
        mock_mongodb_service.find_by_company.side_effect = (
            lambda collection, company, filters=None: [payment_document] if collection == "team_payments" else []
        )

        response = client.get(f"/api/payables?company_id={company_id}&period=30d")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["company_id"] == company_id
        assert data["period"] == "30d"
        assert data["range"]["start"] is not None
        assert data["total"] == 1200.0
        assert data["items"] == [{
            "id": payment_document["id"],
            "kind": "team_payments",
            "description": "Design do site",
            "amount": 1200.0,
            "formatted": "R$ 1.200,00",
            "status": "pending",
            "due_date": "2024-03-20T00:00:00"
        }]

    def test_kind_filter(self, client, mock_mongodb_service, company_id):
        mock_mongodb_service.find_by_company.return_value = []

        response = client.get(f"/api/payables?company_id={company_id}&kind=company_expenses&period=all")

        assert response.status_code == 200
        assert json.loads(response.data)["items"] == []
        mock_mongodb_service.find_by_company.assert_called_once_with(
            "company_expenses",
            company_id,
            {"status": {"$in": ["pending", "overdue"]}}
        )

    def test_requires_company(self, client):
        response = client.get("/api/payables")

        assert response.status_code == 422

class TestCompanySettingsEndpoints:
    """Test cases for /api/companies/<company_id>/settings."""

    def test_get_returns_literal_default(self, client, collections, mock_mongodb_service, company_id):
        mock_mongodb_service.get_collection("company_settings").find_one.return_value = None

        response = client.get(f"/api/companies/{company_id}/settings")

        assert response.status_code == 200
        assert json.loads(response.data) == {
            "company_id": company_id,
            "default_payment_day": 10,
            "is_default": True
        }

    def test_put_stores_payment_day(self, client, mock_mongodb_service, company_id):
        response = client.put(f"/api/companies/{company_id}/settings", json={"default_payment_day": 5})

        assert response.status_code == 200
        assert json.loads(response.data)["default_payment_day"] == 5
        mock_mongodb_service.get_collection("company_settings").update_one.assert_called_once()

    def test_put_rejects_day_out_of_range(self, client, mock_mongodb_service, company_id):
        response = client.put(f"/api/companies/{company_id}/settings", json={"default_payment_day": 0})

        assert response.status_code == 422
        mock_mongodb_service.get_collection("company_settings").update_one.assert_not_called()


class TestReportEndpoints:
    """Test cases for /api/reports."""

    def test_team_report(self, client, mock_mongodb_service, company_id, payment_document):
        mock_mongodb_service.find_by_company.side_effect = [[payment_document], []]

        response = client.get(f"/api/reports/team?company_id={company_id}&period=7d")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["period"] == "7d"
        assert data["metrics"]["services"]["value"] == 1200.0
        assert data["metrics"]["services"]["formatted"] == "R$ 1.200,00"
        assert data["metrics"]["services"]["comparison"]["direction"] == "flat"

    def test_expense_report_for_all_time(self, client, mock_mongodb_service, company_id):
        mock_mongodb_service.find_by_company.return_value = []

        response = client.get(f"/api/reports/expenses?company_id={company_id}&period=all")

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["range"] == {"start": None, "end": None}
        assert data["metrics"]["total"]["comparison"] is None

    def test_report_requires_company(self, client):
        response = client.get("/api/reports/team")

        assert response.status_code == 422


class TestHealthEndpoint:
    """Test cases for /api/healthz."""

    def test_healthy(self, client):
        response = client.get('/api/healthz')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["status"] == "healthy"
        assert data["service"] == "domous-os-api"
        assert data["dependencies"]["mongodb"]["status"] == "healthy"

    def test_unhealthy_mongodb_returns_503(self, client, mock_mongodb_service):
        mock_mongodb_service.health_check.return_value = {
            'status': 'unhealthy',
            'error': 'connection refused',
            'database': 'domous_test'
        }

        response = client.get('/api/healthz')

        assert response.status_code == 503
        assert json.loads(response.data)["status"] == "unhealthy"

    def test_unknown_route_uses_error_body(self, client):
        response = client.get('/api/does-not-exist')

        assert response.status_code == 404
        assert json.loads(response.data)["success"] is False
