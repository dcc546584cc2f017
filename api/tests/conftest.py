# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and fixtures.
"""

import os
import pytest
from datetime import datetime
from typing import Dict, Any
from unittest.mock import MagicMock, Mock
from bson import ObjectId

# Set test environment
os.environ['ENVIRONMENT'] = 'test'
os.environ['OTEL_ENABLED'] = 'false'
os.environ['MONGODB_DATABASE'] = 'domous_test'

from services.mongodb import MongoDBService


@pytest.fixture
def fixed_now():
    """Reference instant used as the clock in service tests."""
    return datetime(2024, 3, 15, 12, 0, 0)


@pytest.fixture
def company_id():
    return str(ObjectId())


@pytest.fixture
def collections():
    """One MagicMock per MongoDB collection, created on first access."""
    return {}


@pytest.fixture
def mock_mongodb_service(collections):
    """MongoDB service whose collections are MagicMocks."""
    service = Mock(spec=MongoDBService)

    def get_collection(name):
        if name not in collections:
            collections[name] = MagicMock(name=name)
        return collections[name]

    service.get_collection.side_effect = get_collection
    service.health_check.return_value = {
        'status': 'healthy',
        'ping': True,
        'version': '7.0.0',
        'database': 'domous_test',
        'connection_pool_size': 10
    }
    return service


@pytest.fixture
def app(mock_mongodb_service):
    """Application wired to the mocked MongoDB service."""
    from app import create_app

    application = create_app(
        config_overrides={'TESTING': True, 'ENVIRONMENT': 'test'},
        mongodb_service=mock_mongodb_service
    )
    return application


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def sample_member_data(company_id) -> Dict[str, Any]:
    """Active fixed-salary team member document."""
    return {
        "_id": ObjectId(),
        "company_id": company_id,
        "name": "Ana Souza",
        "monthly_salary": 3000.0,
        "payment_day": 10,
        "employment_type": "fixed",
        "status": "active",
        "created_at": datetime(2023, 1, 1),
        "updated_at": datetime(2023, 1, 1)
    }


@pytest.fixture
def sample_expense_data(company_id) -> Dict[str, Any]:
    """Pending monthly expense document."""
    return {
        "id": str(ObjectId()),
        "company_id": company_id,
        "description": "Hospedagem",
        "amount": 100.0,
        "billing_cycle": "monthly",
        "status": "pending",
        "due_date": datetime(2024, 3, 1)
    }
