# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Dashboard report endpoints.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag

from domain.date_ranges import format_brl
from models.requests import ReportQuery
from models.responses import ComparisonResponse, DateRangeResponse, MetricResponse, ReportResponse
from services.reports import Report


reports_tag = Tag(name="Reports", description="Period totals for the dashboards")
reports_bp = APIBlueprint(
    'reports',
    __name__,
    url_prefix='/api/reports',
    abp_tags=[reports_tag]
)


def _to_response(report: Report) -> dict:
    metrics = {}
    for name, metric in report.metrics.items():
        comparison = None
        if metric.comparison is not None:
            comparison = ComparisonResponse(
                previous=metric.comparison.previous,
                percent_change=metric.comparison.percent_change,
                direction=metric.comparison.direction,
                tone=metric.comparison.tone,
                text=metric.comparison.text
            )
        metrics[name] = MetricResponse(
            value=round(metric.value, 2),
            formatted=format_brl(metric.value),
            comparison=comparison
        )

    response = ReportResponse(
        company_id=report.company_id,
        period=report.period,
        range=DateRangeResponse(start=report.date_range.start, end=report.date_range.end),
        comparison_range=DateRangeResponse(
            start=report.comparison_range.start,
            end=report.comparison_range.end
        ),
        metrics=metrics
    )
    return response.model_dump(mode="json")


@reports_bp.get('/team', responses={"200": ReportResponse})
def team_report(query: ReportQuery):
    """Team payment totals for the period, compared with the previous period."""
    report = current_app.reports_service.team_report(query.company_id, query.period)
    return jsonify(_to_response(report)), 200


@reports_bp.get('/expenses', responses={"200": ReportResponse})
def expense_report(query: ReportQuery):
    """Expense totals for the period with open recurring expenses projected over it."""
    report = current_app.reports_service.expense_report(query.company_id, query.period)
    return jsonify(_to_response(report)), 200
