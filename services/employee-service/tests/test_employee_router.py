"""
Tests for the employee HTTP endpoints.

Tests cover:
- Route to service mapping for every operation
- Error taxonomy to status code translation
- Request body validation before the service is called
- Request ID propagation
- Health, cache statistics and metrics endpoints
"""

import httpx
import pytest
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY

from employee_api.app import app
from employee_api.cache.memory_cache import EmployeeCache
from employee_api.dependencies import get_employee_service
from employee_api.domain.entities import Employee
from employee_api.domain.exceptions import (
    EmployeeNotFoundException,
    InvalidInputException,
    ServiceUnavailableException,
)
from employee_api.infrastructure.mock_employee_client import MockEmployeeAPIClient
from employee_api.services.employee_service import EmployeeService

BASE = "/api/v1/employee"

VALID_BODY = {"name": "Jane Doe", "salary": 75000, "age": 30, "title": "Software Engineer"}


# ============================================================================
# Successful requests
# ============================================================================


class TestEmployeeEndpoints:
    def test_get_all_employees(self, client, mock_service, sample_employees):
        mock_service.get_all_employees.return_value = sample_employees

        response = client.get(BASE)

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 3
        assert data[0] == {
            "id": "1",
            "employee_name": "Jane Doe",
            "employee_salary": 75000,
            "employee_age": 30,
            "employee_title": "Software Engineer",
            "employee_email": "jane@company.com",
        }

    def test_get_all_employees_empty(self, client, mock_service):
        mock_service.get_all_employees.return_value = []

        response = client.get(BASE)

        assert response.status_code == 200
        assert response.json() == []

    def test_search_by_name(self, client, mock_service, sample_employees):
        mock_service.search_employees_by_name.return_value = [sample_employees[0]]

        response = client.get(f"{BASE}/search/jane")

        assert response.status_code == 200
        assert [item["employee_name"] for item in response.json()] == ["Jane Doe"]
        mock_service.search_employees_by_name.assert_awaited_once_with("jane")

    def test_highest_salary(self, client, mock_service):
        mock_service.get_highest_salary.return_value = 120000

        response = client.get(f"{BASE}/highestSalary")

        assert response.status_code == 200
        assert response.json() == 120000
        mock_service.get_employee_by_id.assert_not_called()

    def test_top_ten_names(self, client, mock_service):
        mock_service.get_top_ten_highest_earning_employee_names.return_value = [
            "John Smith",
            "Jane Doe",
        ]

        response = client.get(f"{BASE}/topTenHighestEarningEmployeeNames")

        assert response.status_code == 200
        assert response.json() == ["John Smith", "Jane Doe"]

    def test_get_employee_by_id(self, client, mock_service, sample_employees):
        mock_service.get_employee_by_id.return_value = sample_employees[1]

        response = client.get(f"{BASE}/2")

        assert response.status_code == 200
        assert response.json()["employee_name"] == "John Smith"
        mock_service.get_employee_by_id.assert_awaited_once_with("2")

    def test_create_employee(self, client, mock_service):
        mock_service.create_employee.return_value = Employee(
            id="new", name="Jane Doe", salary=75000, age=30, title="Software Engineer"
        )

        response = client.post(BASE, json=VALID_BODY)

        assert response.status_code == 201
        assert response.json()["id"] == "new"
        request = mock_service.create_employee.await_args.args[0]
        assert request.name == "Jane Doe"
        assert request.salary == 75000

    def test_delete_employee(self, client, mock_service):
        mock_service.delete_employee_by_id.return_value = "Jane Doe"

        response = client.delete(f"{BASE}/1")

        assert response.status_code == 200
        assert response.text == "Jane Doe"
        assert response.headers["content-type"].startswith("text/plain")
        mock_service.delete_employee_by_id.assert_awaited_once_with("1")


# ============================================================================
# Error translation
# ============================================================================


class TestErrorTranslation:
    def test_not_found(self, client, mock_service):
        mock_service.get_employee_by_id.side_effect = EmployeeNotFoundException("missing")

        response = client.get(f"{BASE}/missing")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "Employee not found with ID: missing"

    def test_invalid_input(self, client, mock_service):
        mock_service.get_employee_by_id.side_effect = InvalidInputException(
            "employee ID", " ", "cannot be null or empty"
        )

        response = client.get(f"{BASE}/%20")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    def test_service_unavailable_hides_details(self, client, mock_service):
        mock_service.get_all_employees.side_effect = ServiceUnavailableException(
            "retrieve employees", "Connection refused to 10.0.0.1"
        )

        response = client.get(BASE)

        assert response.status_code == 503
        body = response.json()
        assert body["error"] == "service_unavailable"
        assert "10.0.0.1" not in response.text
        assert body["details"] == {}

    @pytest.mark.parametrize(
        "path,method_name",
        [
            ("/search/jane", "search_employees_by_name"),
            ("/highestSalary", "get_highest_salary"),
            ("/topTenHighestEarningEmployeeNames", "get_top_ten_highest_earning_employee_names"),
        ],
    )
    def test_aggregations_unavailable(self, client, mock_service, path, method_name):
        getattr(mock_service, method_name).side_effect = ServiceUnavailableException("x")

        response = client.get(f"{BASE}{path}")

        assert response.status_code == 503

    def test_delete_not_found(self, client, mock_service):
        mock_service.delete_employee_by_id.side_effect = EmployeeNotFoundException("9")

        response = client.delete(f"{BASE}/9")

        assert response.status_code == 404

    def test_delete_unavailable(self, client, mock_service):
        mock_service.delete_employee_by_id.side_effect = ServiceUnavailableException(
            "delete employee", "operation not confirmed"
        )

        response = client.delete(f"{BASE}/1")

        assert response.status_code == 503

    def test_unexpected_error_is_500(self, client, mock_service):
        labels = {"method": "GET", "endpoint": BASE, "status": "500"}
        before = REGISTRY.get_sample_value("employee_api_http_requests_total", labels) or 0
        mock_service.get_all_employees.side_effect = RuntimeError("boom")

        response = client.get(BASE, headers={"X-Request-ID": "req-500"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "req-500"
        assert response.headers["X-Request-ID"] == "req-500"
        assert "boom" not in response.text
        after = REGISTRY.get_sample_value("employee_api_http_requests_total", labels)
        assert after == before + 1


# ============================================================================
# Request validation
# ============================================================================


class TestCreateValidation:
    def test_invalid_body_rejected_before_service(self, client, mock_service):
        response = client.post(
            BASE, json={"name": "", "salary": -1000, "age": 10, "title": ""}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_input"
        assert {"name", "salary", "age", "title"} <= set(body["details"])
        mock_service.create_employee.assert_not_called()

    @pytest.mark.parametrize(
        "override",
        [
            {"name": "   "},
            {"title": "\t"},
            {"salary": 0},
            {"age": 15},
            {"age": 76},
        ],
    )
    def test_invalid_field(self, client, mock_service, override):
        response = client.post(BASE, json={**VALID_BODY, **override})

        assert response.status_code == 400
        mock_service.create_employee.assert_not_called()

    @pytest.mark.parametrize("missing", ["name", "salary", "age", "title"])
    def test_missing_field(self, client, mock_service, missing):
        body = {key: value for key, value in VALID_BODY.items() if key != missing}

        response = client.post(BASE, json=body)

        assert response.status_code == 400
        mock_service.create_employee.assert_not_called()

    @pytest.mark.parametrize("age", [16, 75])
    def test_age_bounds_inclusive(self, client, mock_service, age):
        mock_service.create_employee.return_value = Employee(id="new", name="Jane Doe", age=age)

        response = client.post(BASE, json={**VALID_BODY, "age": age})

        assert response.status_code == 201


# ============================================================================
# Unreachable upstream through the real service
# ============================================================================


@pytest.fixture
def unreachable_client(no_wait_policy):
    """Test client wired to a real service whose upstream refuses every connection."""

    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    api_client = MockEmployeeAPIClient(
        base_url="http://upstream.test/api/v1/employee",
        retry_policy=no_wait_policy,
        transport=httpx.MockTransport(refuse),
    )
    service = EmployeeService(api_client=api_client, cache=EmployeeCache())

    async def override_get_employee_service():
        return service

    app.dependency_overrides[get_employee_service] = override_get_employee_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestUnreachableUpstream:
    def test_create_returns_503(self, unreachable_client):
        response = unreachable_client.post(BASE, json=VALID_BODY)

        assert response.status_code == 503

    def test_list_returns_503(self, unreachable_client):
        assert unreachable_client.get(BASE).status_code == 503

    def test_blank_search_needs_no_upstream(self, unreachable_client):
        response = unreachable_client.get(f"{BASE}/search/%20%20")

        assert response.status_code == 200
        assert response.json() == []


# ============================================================================
# Cross-cutting endpoints
# ============================================================================


class TestRequestId:
    def test_request_id_echoed(self, client, mock_service):
        mock_service.get_employee_by_id.side_effect = EmployeeNotFoundException("x")

        response = client.get(f"{BASE}/x", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"
        assert response.json()["request_id"] == "req-123"

    def test_request_id_generated(self, client, mock_service):
        mock_service.get_all_employees.return_value = []

        response = client.get(BASE)

        assert response.headers["X-Request-ID"]


class TestHealthAndMonitoring:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_cache_stats_disabled(self, client):
        response = client.get("/api/v1/cache/stats")

        assert response.status_code == 200
        assert response.json()["enabled"] is False

    def test_cache_stats_enabled(self, mock_service):
        mock_service.cache = EmployeeCache()

        async def override_get_employee_service():
            return mock_service

        app.dependency_overrides[get_employee_service] = override_get_employee_service
        try:
            with TestClient(app) as test_client:
                response = test_client.get("/api/v1/cache/stats")
        finally:
            app.dependency_overrides.clear()

        body = response.json()
        assert body["enabled"] is True
        assert body["memory"]["size"] == 0

    def test_metrics(self, client, mock_service):
        mock_service.get_all_employees.return_value = []
        client.get(BASE)

        response = client.get("/metrics")

        assert response.status_code == 200
        assert "employee_api_http_requests_total" in response.text

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["employees"] == BASE
