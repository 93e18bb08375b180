"""
External employee API client interface.

Defines the contract for the upstream employee data service.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import CreateEmployeeRequest, EmployeeSchema, UpstreamResponse


class UpstreamNotFoundError(Exception):
    """Raised when the upstream service answers 404 for a single resource."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Upstream resource not found: {resource}")


class IEmployeeAPIClient(ABC):
    """
    Abstract interface for the upstream employee API.

    Implementations surface three outcomes: an envelope on success,
    ``UpstreamNotFoundError`` for a missing single resource, and the raw
    transport or HTTP failure for anything else.
    """

    @abstractmethod
    async def get_all_employees(self) -> Optional[UpstreamResponse[List[EmployeeSchema]]]:
        """
        Fetch every employee.

        Returns:
            Envelope with the employee list (an upstream 404 yields an empty
            list), or None when the upstream body is empty

        Raises:
            httpx.HTTPError: If the call fails after retries
        """
        pass

    @abstractmethod
    async def get_employee_by_id(
        self, employee_id: str
    ) -> Optional[UpstreamResponse[EmployeeSchema]]:
        """
        Fetch one employee.

        Raises:
            UpstreamNotFoundError: If the upstream service has no such employee
            httpx.HTTPError: If the call fails after retries
        """
        pass

    @abstractmethod
    async def create_employee(
        self, request: CreateEmployeeRequest
    ) -> Optional[UpstreamResponse[EmployeeSchema]]:
        """
        Create an employee.

        Raises:
            httpx.HTTPError: If the call fails after retries
        """
        pass

    @abstractmethod
    async def delete_employee(self, name: str) -> Optional[UpstreamResponse[bool]]:
        """
        Delete an employee by name.

        Raises:
            UpstreamNotFoundError: If the upstream service has no such employee
            httpx.HTTPError: If the call fails after retries
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
        pass
