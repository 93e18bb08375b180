"""
Test configuration and fixtures
"""

from typing import List
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from employee_api.app import app
from employee_api.cache.memory_cache import EmployeeCache
from employee_api.dependencies import get_employee_service
from employee_api.domain.entities import Employee
from employee_api.infrastructure.retry import RetryPolicy
from employee_api.services.employee_service import EmployeeService


@pytest.fixture
def sample_employees() -> List[Employee]:
    """A small roster with distinct salaries."""
    return [
        Employee(
            id="1",
            name="Jane Doe",
            salary=75000,
            age=30,
            title="Software Engineer",
            email="jane@company.com",
        ),
        Employee(
            id="2",
            name="John Smith",
            salary=120000,
            age=45,
            title="Engineering Manager",
            email="john@company.com",
        ),
        Employee(
            id="3",
            name="Janet Jackson",
            salary=50000,
            age=25,
            title="QA Engineer",
            email="janet@company.com",
        ),
    ]


@pytest.fixture
def no_wait_policy() -> RetryPolicy:
    """Three attempts without sleeping between them."""
    return RetryPolicy(max_attempts=3, initial_backoff=0, max_backoff=0)


@pytest.fixture
def mock_api_client() -> AsyncMock:
    """Create mock upstream API client."""
    return AsyncMock()


@pytest.fixture
def employee_cache() -> EmployeeCache:
    """Create a fresh unbounded cache."""
    return EmployeeCache()


@pytest.fixture
def employee_service(mock_api_client) -> EmployeeService:
    """Employee service without a cache."""
    return EmployeeService(api_client=mock_api_client)


@pytest.fixture
def cached_employee_service(mock_api_client, employee_cache) -> EmployeeService:
    """Employee service backed by an in-memory cache."""
    return EmployeeService(api_client=mock_api_client, cache=employee_cache)


@pytest.fixture
def mock_service() -> AsyncMock:
    """Create mock employee service."""
    service = AsyncMock()
    service.cache = None
    return service


@pytest.fixture
def client(mock_service):
    """Create a test client with the employee service dependency overridden."""

    async def override_get_employee_service():
        return mock_service

    app.dependency_overrides[get_employee_service] = override_get_employee_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
