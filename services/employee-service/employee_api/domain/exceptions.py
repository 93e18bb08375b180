"""
Custom exceptions for the employee service domain.

These exceptions form the public error taxonomy of the service. They are
raised only by the business layer and are independent of infrastructure
concerns (HTTP, upstream client, etc.). The original failure, when there is
one, is chained as ``__cause__``.
"""

from typing import Any, Optional


class EmployeeServiceException(Exception):
    """Base exception for all employee service errors."""

    error_code = "employee_service_error"

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidInputException(EmployeeServiceException):
    """Raised when an identifier or request payload is missing or malformed."""

    error_code = "invalid_input"

    def __init__(self, field: str, value: Any, reason: str):
        message = f"Invalid {field}: {reason}"
        super().__init__(
            message=message,
            details={"field": field, "value": None if value is None else str(value), "reason": reason},
        )


class EmployeeNotFoundException(EmployeeServiceException):
    """Raised when the upstream service has no employee for an identifier."""

    error_code = "not_found"

    def __init__(self, employee_id: str, reason: Optional[str] = None):
        message = f"Employee not found with ID: {employee_id}"
        super().__init__(
            message=message, details={"employee_id": employee_id, "reason": reason}
        )


class ServiceUnavailableException(EmployeeServiceException):
    """Raised when the upstream service fails or returns no usable payload."""

    error_code = "service_unavailable"

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Failed to {operation}"
        if reason:
            message += f" - {reason}"
        super().__init__(
            message=message, details={"operation": operation, "reason": reason}
        )
