# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Team automation endpoint: salary generation and overdue sweep.

Invoked from the dashboard's manual button or by an external scheduler.
"""

from flask import request, jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import logging

from models.requests import AutomationQuery
from models.responses import AutomationResponse, ErrorResponse
from middleware.error_handler import CustomException, error_body
from middleware.validation import parse_model

# Set up logging and tracing
logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

automation_tag = Tag(name="Team Automation", description="Recurring salaries and overdue status updates")
AUTOMATION_RESPONSES = {"200": AutomationResponse, "400": ErrorResponse, "500": ErrorResponse}

automation_bp = APIBlueprint(
    'team_automation',
    __name__,
    url_prefix='/api/team-automation',
    abp_tags=[automation_tag]
)


def _run_automation():
    with tracer.start_as_current_span(
        "team_automation.request",
        attributes={"http.method": request.method}
    ) as span:
        query = parse_model(AutomationQuery, {"action": request.args.get('action') or 'all'})
        span.set_attribute("automation.action", query.action)

        try:
            results = current_app.team_automation_service.run(query.action)
        except CustomException:
            raise
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, str(e)))
            logger.error(
                "Team automation failed",
                extra={"extra_fields": {"action": query.action, "error": str(e)}},
                exc_info=True
            )
            message = str(e) or "Unknown error"
            if current_app.config.get('ENVIRONMENT') == 'production':
                message = "An unexpected error occurred"
            return jsonify(error_body(message)), 500

        span.set_status(Status(StatusCode.OK))
        response = AutomationResponse(success=True, results=results)
        return jsonify(response.model_dump(by_alias=True)), 200


@automation_bp.get('', responses=AUTOMATION_RESPONSES)
def run_team_automation_get():
    """
    Run the team automation.

    ``action`` selects the phase: ``all`` (default), ``generate_salaries``
    or ``update_overdue``. Other values run nothing and report zero counts.
    """
    return _run_automation()


@automation_bp.post('', responses=AUTOMATION_RESPONSES)
def run_team_automation_post():
    """
    Run the team automation (scheduler entry point).

    Accepts the same ``action`` query parameter as the GET variant.
    """
    return _run_automation()
