# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request telemetry for the Flask app.

Every request is traced by the Flask instrumentation; on top of that the
current span is tagged with the company and automation action the request
refers to, and one structured log line is written per request.
"""

import time
import logging
from typing import Dict, Optional
from flask import Flask, Response, g, request
from opentelemetry import trace
from opentelemetry.instrumentation.flask import FlaskInstrumentor

logger = logging.getLogger(__name__)

TRACE_HEADER = "X-Trace-Id"
QUIET_PATHS = ("/api/healthz",)


def _company_id() -> Optional[str]:
    """Company the request is scoped to, from the path, query or JSON body."""
    view_args = request.view_args or {}
    if view_args.get("company_id"):
        return view_args["company_id"]
    if request.args.get("company_id"):
        return request.args["company_id"]

    body = request.get_json(silent=True) if request.is_json else None
    if isinstance(body, dict) and isinstance(body.get("company_id"), str):
        return body["company_id"]
    return None


def _domain_attributes() -> Dict[str, str]:
    attributes = {}
    company_id = _company_id()
    if company_id:
        attributes["company.id"] = company_id
    if request.path.startswith("/api/team-automation"):
        attributes["automation.action"] = request.args.get("action") or "all"
    return attributes


def _start_request() -> None:
    g.request_started = time.perf_counter()
    g.trace_id = None

    span = trace.get_current_span()
    if not span.is_recording():
        return

    g.trace_id = format(span.get_span_context().trace_id, "032x")
    span.set_attributes(_domain_attributes())


def _finish_request(response: Response) -> Response:
    elapsed_ms = round((time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000, 2)

    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute("http.server.duration_ms", elapsed_ms)

    fields = {
        "method": request.method,
        "route": request.url_rule.rule if request.url_rule else request.path,
        "status_code": response.status_code,
        "duration_ms": elapsed_ms,
        "trace_id": g.get("trace_id")
    }
    fields.update({key.replace(".", "_"): value for key, value in _domain_attributes().items()})

    if response.status_code >= 500:
        level = logging.WARNING
    elif request.path in QUIET_PATHS:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logger.log(level, f"{request.method} {fields['route']} -> {response.status_code}", extra={"extra_fields": fields})

    if g.get("trace_id"):
        response.headers[TRACE_HEADER] = g.trace_id
    return response


def add_observability_middleware(app: Flask) -> None:
    """Instrument the app and register the request telemetry hooks."""
    FlaskInstrumentor().instrument_app(app)
    app.before_request(_start_request)
    app.after_request(_finish_request)
