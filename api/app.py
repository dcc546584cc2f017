"""
Domous OS API - Flask Application Entry Point

This module builds the Flask application with OpenAPI 3.0 support,
configures middleware, and wires the team automation, payables and
reporting services of the company back-office plus signup provisioning.
"""

import os
from datetime import datetime
from typing import Any, Dict, Optional
from flask import jsonify
from flask_openapi3 import OpenAPI, Info, Tag
from observability.config import setup_observability
from observability.middleware import add_observability_middleware

# Import middleware and services
from middleware.cors import configure_cors
from middleware.error_handler import ErrorHandlerMiddleware, register_custom_error_handlers
from services.mongodb import MongoDBService
from services.team_automation import TeamAutomationService
from services.payables import PayablesService
from services.reports import ReportsService
from services.signup import SignupService

SERVICE_VERSION = os.getenv('SERVICE_VERSION', '1.0.0')

# OpenAPI info
info = Info(
    title="Domous OS API",
    version=SERVICE_VERSION,
    description="Team payroll automation, payables lifecycle and dashboard reports"
)

# API tags for organization
tags = [
    Tag(name="Team Automation", description="Recurring salaries and overdue status updates"),
    Tag(name="Payables", description="Team payments, partner commissions and expenses"),
    Tag(name="Company Settings", description="Company payment defaults"),
    Tag(name="Reports", description="Period totals for the dashboards"),
    Tag(name="Signup", description="Provisioning of newly registered users"),
    Tag(name="Health", description="System health and status")
]


def _load_config() -> Dict[str, Any]:
    """Read application settings from the environment."""
    environment = os.getenv('ENVIRONMENT', 'development')
    return {
        'ENVIRONMENT': environment,
        'DEBUG': environment == 'development',
        'DOCS_ENABLED': os.getenv('DOCS_ENABLED', 'true').lower() == 'true',
        'OTEL_ENABLED': os.getenv('OTEL_ENABLED', 'true').lower() == 'true',
        'MONGODB_URI': os.getenv('MONGODB_URI', 'mongodb://localhost:27017/domous_dev'),
        'MONGODB_DATABASE': os.getenv('MONGODB_DATABASE', 'domous_dev'),
    }


def create_app(config_overrides: Optional[Dict[str, Any]] = None,
               mongodb_service: Optional[MongoDBService] = None) -> OpenAPI:
    """
    Create and configure the Flask application.

    Args:
        config_overrides: Values applied on top of the environment configuration
        mongodb_service: Pre-built MongoDB service, used instead of a new connection

    Returns:
        Configured OpenAPI (Flask) application
    """
    # Initialize observability first
    setup_observability()

    app = OpenAPI(__name__, info=info)

    # Environment configuration
    app.config.update(_load_config())
    if config_overrides:
        app.config.update(config_overrides)

    # Add observability middleware
    add_observability_middleware(app)

    # Initialize services
    if mongodb_service is None:
        mongodb_service = MongoDBService(app.config['MONGODB_URI'], app.config['MONGODB_DATABASE'])

    app.mongodb_service = mongodb_service
    app.team_automation_service = TeamAutomationService(mongodb_service)
    app.payables_service = PayablesService(mongodb_service)
    app.reports_service = ReportsService(mongodb_service)
    app.signup_service = SignupService(mongodb_service)

    # Error handling and CORS
    ErrorHandlerMiddleware(app)
    register_custom_error_handlers(app)
    configure_cors(app)

    # Register routes
    from routes.team_automation import automation_bp
    from routes.payables import payables_bp, settings_bp
    from routes.reports import reports_bp
    from routes.signup import signup_bp

    app.register_api(automation_bp)
    app.register_api(payables_bp)
    app.register_api(settings_bp)
    app.register_api(reports_bp)
    app.register_api(signup_bp)

    @app.get('/api/healthz', tags=[tags[-1]])
    def health_check():
        """Health check reporting MongoDB connectivity"""
        mongodb_health = app.mongodb_service.health_check()
        healthy = mongodb_health.get('status') == 'healthy'

        health_data = {
            "status": "healthy" if healthy else "unhealthy",
            "service": "domous-os-api",
            "version": SERVICE_VERSION,
            "environment": app.config['ENVIRONMENT'],
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "dependencies": {"mongodb": mongodb_health}
        }
        return jsonify(health_data), 200 if healthy else 503

    return app


if __name__ == '__main__':
    # Development server
    application = create_app()
    application.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=application.config['DEBUG']
    )
