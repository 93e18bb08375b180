"""
Shared dependencies for the application.

Provides dependency injection functions used across routers.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .services.employee_service import EmployeeService

# Global service instance (set by main app)
_employee_service: Optional["EmployeeService"] = None


def set_employee_service(service: Optional["EmployeeService"]) -> None:
    """
    Set the global employee service instance.

    Called by main app during startup and cleared on shutdown.
    """
    global _employee_service
    _employee_service = service


async def get_employee_service() -> "EmployeeService":
    """
    Get employee service instance for dependency injection.

    Used by all routers that need the employee service.
    """
    if _employee_service is None:
        raise RuntimeError("Employee service not initialized")
    return _employee_service
