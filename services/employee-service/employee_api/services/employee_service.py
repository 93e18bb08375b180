"""
Business logic service layer.

Orchestrates employee operations on top of the upstream API client,
performs the in-memory aggregations and translates every failure into the
service's error taxonomy.

Wrapping rule: taxonomy exceptions propagate unchanged, so a not-found
condition always surfaces as ``EmployeeNotFoundException`` no matter how it
was detected. Any other failure becomes ``ServiceUnavailableException`` with
the original failure chained as its cause.
"""

import logging
from typing import List, Optional

from ..cache.memory_cache import ALL_EMPLOYEES_KEY, EmployeeCache, employee_key
from ..domain.aggregations import (
    TOP_EARNERS_LIMIT,
    filter_by_name,
    highest_salary,
    top_earner_names,
)
from ..domain.entities import Employee
from ..domain.exceptions import (
    EmployeeNotFoundException,
    EmployeeServiceException,
    InvalidInputException,
    ServiceUnavailableException,
)
from ..infrastructure.employee_api_client import IEmployeeAPIClient, UpstreamNotFoundError
from ..models import CreateEmployeeRequest

logger = logging.getLogger(__name__)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class EmployeeService:
    """
    Employee service with optional in-memory caching.

    Caching strategy:
    1. The full employee list is cached unless it is empty
    2. Single-employee lookups are cached by ID
    3. Create invalidates the list; delete invalidates the list and the ID
    4. A fetch that started before an invalidation does not write its result back
    """

    def __init__(self, api_client: IEmployeeAPIClient, cache: Optional[EmployeeCache] = None):
        """
        Initialize employee service.

        Args:
            api_client: Upstream employee API client
            cache: Key-value store for employee data, None disables caching
        """
        self.api_client = api_client
        self.cache = cache
        self._cache_generation = 0

    def _invalidate(self, *keys: str) -> None:
        """Drop cache entries and outdate every fetch still in flight."""
        if self.cache is None:
            return
        self._cache_generation += 1
        for key in keys:
            self.cache.delete(key)

    def _store(self, generation: int, key: str, value) -> None:
        """Cache a fetched value unless an invalidation happened since the fetch began."""
        if self.cache is None:
            return
        if generation != self._cache_generation:
            logger.debug(f"Skipping stale cache write: {key}")
            return
        self.cache.set(key, value)

    async def get_all_employees(self) -> List[Employee]:
        """
        Retrieve all employees.

        Returns:
            Employee list, empty when the upstream service has none

        Raises:
            ServiceUnavailableException: If the upstream call fails
        """
        logger.info("Retrieving all employees")

        if self.cache is not None:
            cached = self.cache.get(ALL_EMPLOYEES_KEY)
            if cached is not None:
                return list(cached)

        generation = self._cache_generation

        try:
            response = await self.api_client.get_all_employees()

            if response is None or response.data is None:
                logger.warning("No employee data received from API")
                return []

            employees = [schema.to_entity() for schema in response.data]

        except Exception as e:
            logger.error(f"Failed to retrieve all employees: {e}", exc_info=True)
            raise ServiceUnavailableException("retrieve employees", str(e)) from e

        logger.info(f"Retrieved {len(employees)} employees")

        if employees:
            self._store(generation, ALL_EMPLOYEES_KEY, tuple(employees))

        return employees

    async def search_employees_by_name(self, fragment: Optional[str]) -> List[Employee]:
        """
        Find employees whose name contains a fragment, ignoring case.

        A missing or whitespace-only fragment returns an empty list without
        contacting the upstream service.

        Args:
            fragment: Name fragment to search for

        Returns:
            Matching employees in upstream order
        """
        logger.info(f"Searching employees by name: {fragment!r}")

        if _is_blank(fragment):
            logger.warning("Empty search string provided")
            return []

        try:
            employees = await self.get_all_employees()
            matches = filter_by_name(employees, fragment)
        except EmployeeServiceException:
            raise
        except Exception as e:
            logger.error(f"Failed to search employees by name {fragment!r}: {e}", exc_info=True)
            raise ServiceUnavailableException("search employees by name", str(e)) from e

        logger.info(f"Found {len(matches)} employees matching search term: {fragment!r}")
        return matches

    async def get_employee_by_id(self, employee_id: Optional[str]) -> Employee:
        """
        Retrieve a single employee.

        Args:
            employee_id: Employee identifier

        Returns:
            The employee

        Raises:
            InvalidInputException: If the ID is missing or blank
            EmployeeNotFoundException: If the upstream service has no such
                employee or returns no payload for it
            ServiceUnavailableException: If the upstream call fails
        """
        logger.info(f"Retrieving employee by ID: {employee_id}")

        if _is_blank(employee_id):
            raise InvalidInputException("employee ID", employee_id, "cannot be null or empty")

        if self.cache is not None:
            cached = self.cache.get(employee_key(employee_id))
            if cached is not None:
                return cached

        generation = self._cache_generation

        try:
            response = await self.api_client.get_employee_by_id(employee_id)

            if response is None or response.data is None:
                raise EmployeeNotFoundException(employee_id, "upstream returned no data")

            employee = response.data.to_entity()

        except EmployeeNotFoundException:
            logger.warning(f"Employee not found with ID: {employee_id} (empty payload)")
            raise
        except UpstreamNotFoundError as e:
            logger.warning(f"Employee not found with ID: {employee_id}")
            raise EmployeeNotFoundException(employee_id, "upstream reported not found") from e
        except Exception as e:
            logger.error(f"Failed to retrieve employee by ID {employee_id}: {e}", exc_info=True)
            raise ServiceUnavailableException("retrieve employee", str(e)) from e

        logger.info(f"Retrieved employee: {employee.name}")

        self._store(generation, employee_key(employee_id), employee)

        return employee

    async def get_highest_salary(self) -> int:
        """
        Highest salary among all employees.

        Returns:
            The maximum present salary, or 0 when there is none
        """
        logger.info("Finding highest salary among all employees")

        try:
            employees = await self.get_all_employees()
            result = highest_salary(employees)
        except EmployeeServiceException:
            raise
        except Exception as e:
            logger.error(f"Failed to find highest salary: {e}", exc_info=True)
            raise ServiceUnavailableException("find highest salary", str(e)) from e

        logger.info(f"Highest salary found: {result}")
        return result

    async def get_top_ten_highest_earning_employee_names(
        self, limit: int = TOP_EARNERS_LIMIT
    ) -> List[Optional[str]]:
        """
        Names of the top earners, highest salary first.

        Args:
            limit: Maximum number of names to return

        Returns:
            Up to ``limit`` names; ties keep upstream order
        """
        logger.info(f"Finding top {limit} highest earning employees")

        try:
            employees = await self.get_all_employees()
            names = top_earner_names(employees, limit)
        except EmployeeServiceException:
            raise
        except Exception as e:
            logger.error(f"Failed to find top earning employees: {e}", exc_info=True)
            raise ServiceUnavailableException("find top earning employees", str(e)) from e

        logger.info(f"Found {len(names)} top earning employees")
        return names

    async def create_employee(self, request: Optional[CreateEmployeeRequest]) -> Employee:
        """
        Create a new employee.

        Args:
            request: Validated creation request

        Returns:
            The created employee as echoed by the upstream service

        Raises:
            InvalidInputException: If the request is missing
            ServiceUnavailableException: If the upstream call fails or returns
                no data
        """
        if request is None:
            raise InvalidInputException("employee input", None, "cannot be null")

        logger.info(f"Creating new employee: {request.name}")

        try:
            response = await self.api_client.create_employee(request)

            if response is None or response.data is None:
                raise ServiceUnavailableException("create employee", "no data returned")

            employee = response.data.to_entity()

        except ServiceUnavailableException:
            raise
        except Exception as e:
            logger.error(f"Failed to create employee {request.name}: {e}", exc_info=True)
            raise ServiceUnavailableException("create employee", str(e)) from e

        logger.info(f"Successfully created employee: {employee.name}")

        self._invalidate(ALL_EMPLOYEES_KEY)

        return employee

    async def delete_employee_by_id(self, employee_id: Optional[str]) -> str:
        """
        Delete an employee by ID.

        The upstream service deletes by name, so the employee is resolved
        first. Resolution errors propagate unchanged, which means a missing
        employee never reaches the delete call.

        Args:
            employee_id: Employee identifier

        Returns:
            Name of the deleted employee

        Raises:
            InvalidInputException: If the ID is missing or blank
            EmployeeNotFoundException: If the employee does not exist
            ServiceUnavailableException: If the upstream call fails or the
                deletion is not confirmed
        """
        logger.info(f"Deleting employee by ID: {employee_id}")

        if _is_blank(employee_id):
            raise InvalidInputException("employee ID", employee_id, "cannot be null or empty")

        employee = await self.get_employee_by_id(employee_id)
        employee_name = employee.name

        if _is_blank(employee_name):
            raise ServiceUnavailableException("delete employee", "employee has no name to delete by")

        try:
            response = await self.api_client.delete_employee(employee_name)
        except UpstreamNotFoundError as e:
            logger.warning(f"Cannot delete employee - not found by name: {employee_name}")
            raise EmployeeNotFoundException(employee_id, "upstream reported not found") from e
        except Exception as e:
            logger.error(f"Failed to delete employee by ID {employee_id}: {e}", exc_info=True)
            raise ServiceUnavailableException("delete employee", str(e)) from e

        if response is None or response.data is not True:
            logger.error(f"Deletion of employee {employee_name} was not confirmed")
            raise ServiceUnavailableException("delete employee", "operation not confirmed")

        logger.info(f"Successfully deleted employee: {employee_name}")

        self._invalidate(ALL_EMPLOYEES_KEY, employee_key(employee_id))

        return employee_name
