# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Tests for middleware functionality.
"""

import json
import logging
import pytest
from unittest.mock import Mock
from flask import Flask
from pydantic import BaseModel, Field, ValidationError

from middleware.validation import format_validation_errors, parse_model
from middleware.error_handler import (
    ErrorHandlerMiddleware, CustomException, ValidationException,
    NotFoundException, ConflictException, ServiceUnavailableException,
    error_body, register_custom_error_handlers
)
from middleware.cors import CORSMiddleware, configure_cors


class SampleModel(BaseModel):
    title: str
    day: int = Field(..., ge=1, le=31)


class TestValidation:
    """Test request validation helpers."""

    def test_parse_model_success(self):
        parsed = parse_model(SampleModel, {"title": "Folha", "day": 10})

        assert parsed.title == "Folha"
        assert parsed.day == 10

    def test_parse_model_raises_validation_exception(self):
        with pytest.raises(ValidationException) as exc_info:
            parse_model(SampleModel, {"title": "Folha", "day": 40})

        error = exc_info.value
        assert error.status_code == 400
        assert error.message.startswith("Invalid request: day:")
        assert error.validation_errors[0]["field"] == "day"

    def test_format_validation_errors(self):
        with pytest.raises(ValidationError) as exc_info:
            SampleModel.model_validate({"day": "x"})

        errors = format_validation_errors(exc_info.value)

        fields = sorted(error["field"] for error in errors)
        assert fields == ["day", "title"]
        assert all("message" in error and "type" in error for error in errors)


class TestErrorHandlerMiddleware:
    """Test error handler middleware functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.app = Flask(__name__)
        self.app.config['ENVIRONMENT'] = 'test'
        self.error_handler = ErrorHandlerMiddleware(self.app)
        register_custom_error_handlers(self.app)

        @self.app.route('/conflict')
        def conflict():
            raise ConflictException("Cannot change status from 'paid' to 'paid'")

        @self.app.route('/validation')
        def validation():
            raise ValidationException("Invalid request", [{"field": "action"}])

        @self.app.route('/boom')
        def boom():
            raise RuntimeError("database unreachable")

        self.client = self.app.test_client()

    def test_error_body(self):
        assert error_body("oops") == {"success": False, "error": "oops"}
        assert error_body("oops", [{"field": "x"}])["details"] == [{"field": "x"}]

    def test_custom_exception_status_and_body(self):
        response = self.client.get('/conflict')

        assert response.status_code == 409
        assert json.loads(response.data) == {
            "success": False,
            "error": "Cannot change status from 'paid' to 'paid'"
        }

    def test_validation_exception_includes_details(self):
        response = self.client.get('/validation')

        assert response.status_code == 400
        assert json.loads(response.data)["details"] == [{"field": "action"}]

    def test_unexpected_error_returns_500(self):
        response = self.client.get('/boom')

        assert response.status_code == 500
        assert json.loads(response.data) == {"success": False, "error": "database unreachable"}

    def test_unexpected_error_hidden_in_production(self):
        self.app.config['ENVIRONMENT'] = 'production'

        response = self.client.get('/boom')

        assert response.status_code == 500
        assert json.loads(response.data)["error"] == "An unexpected error occurred"

    def test_not_found_route(self):
        response = self.client.get('/missing')

        assert response.status_code == 404
        assert json.loads(response.data)["success"] is False

    def test_exception_types(self):
        assert NotFoundException("x").status_code == 404
        assert NotFoundException("x").error_type == "resource-not-found"
        assert ConflictException("x").status_code == 409
        assert ServiceUnavailableException("x").status_code == 503
        assert CustomException("x").status_code == 500


class TestCORSMiddleware:
    """Test CORS middleware functionality."""

    def setup_method(self):
        """Set up test fixtures."""
        self.app = Flask(__name__)

        @self.app.route('/ping', methods=['GET', 'POST'])
        def ping():
            return {"ok": True}

    def test_cors_configuration(self):
        cors_middleware = configure_cors(self.app, allowed_origins=["http://localhost:3000"])

        assert isinstance(cors_middleware, CORSMiddleware)
        assert "http://localhost:3000" in cors_middleware.allowed_origins
        assert "Apikey" in cors_middleware.allowed_headers
        assert "X-Client-Info" in cors_middleware.allowed_headers

    def test_is_origin_allowed(self):
        cors_middleware = CORSMiddleware(
            self.app,
            allowed_origins=["http://localhost:3000", "https://domous-os-git-*"]
        )

        assert cors_middleware.is_origin_allowed("http://localhost:3000") is True
        assert cors_middleware.is_origin_allowed("https://domous-os-git-feature.vercel.app") is True
        assert cors_middleware.is_origin_allowed("http://malicious.com") is False
        assert cors_middleware.is_origin_allowed(None) is False

    def test_preflight_allowed_origin(self):
        CORSMiddleware(self.app, allowed_origins=["http://localhost:3000"])
        client = self.app.test_client()

        response = client.options('/ping', headers={'Origin': 'http://localhost:3000'})

        assert response.status_code == 200
        assert response.headers.get('Access-Control-Allow-Origin') == "http://localhost:3000"
        assert 'Access-Control-Allow-Methods' in response.headers

    def test_preflight_rejected_origin(self):
        CORSMiddleware(self.app, allowed_origins=["http://localhost:3000"])
        client = self.app.test_client()

        response = client.options('/ping', headers={'Origin': 'http://malicious.com'})

        assert response.status_code == 403

    def test_wildcard_origin(self):
        CORSMiddleware(self.app, allowed_origins=["*"])
        client = self.app.test_client()

        response = client.post('/ping', headers={'Origin': 'https://scheduler.example.com'})

        assert response.headers.get('Access-Control-Allow-Origin') == '*'


class TestRequestTelemetry:
    """Test the per-request log line written by the observability hooks."""

    def _request_records(self, caplog):
        return [record for record in caplog.records if record.name == "observability.middleware"]

    def test_logs_route_and_company(self, client, mock_mongodb_service, caplog):
        caplog.set_level(logging.DEBUG, logger="observability.middleware")
        mock_mongodb_service.find_by_company.return_value = []

        client.get('/api/reports/team?company_id=c1&period=7d')

        record = self._request_records(caplog)[-1]
        assert record.levelno == logging.INFO
        fields = record.extra_fields
        assert fields["route"] == "/api/reports/team"
        assert fields["status_code"] == 200
        assert fields["company_id"] == "c1"
        assert fields["duration_ms"] >= 0

    def test_logs_company_from_path_and_automation_action(self, app, client, mock_mongodb_service, caplog):
        caplog.set_level(logging.DEBUG, logger="observability.middleware")
        mock_mongodb_service.get_collection("company_settings").find_one.return_value = None

        client.get('/api/companies/c9/settings')
        client.post('/api/team-automation?action=drop_all')

        settings_record, automation_record = self._request_records(caplog)[-2:]
        assert settings_record.extra_fields["route"] == "/api/companies/<string:company_id>/settings"
        assert settings_record.extra_fields["company_id"] == "c9"
        assert automation_record.extra_fields["automation_action"] == "drop_all"

    def test_server_errors_log_at_warning(self, app, client, caplog):
        caplog.set_level(logging.DEBUG, logger="observability.middleware")
        app.team_automation_service = Mock()
        app.team_automation_service.run.side_effect = RuntimeError("boom")

        client.post('/api/team-automation')

        record = self._request_records(caplog)[-1]
        assert record.levelno == logging.WARNING
        assert record.extra_fields["status_code"] == 500
        assert record.extra_fields["automation_action"] == "all"

    def test_health_checks_log_at_debug(self, client, caplog):
        caplog.set_level(logging.DEBUG, logger="observability.middleware")

        client.get('/api/healthz')

        assert self._request_records(caplog)[-1].levelno == logging.DEBUG
