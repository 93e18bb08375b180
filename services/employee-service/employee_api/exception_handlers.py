"""
Centralized error handlers for FastAPI.

Maps the service's error taxonomy to HTTP responses. Handlers only translate
exceptions that the business layer already raised; anything unrecognized
becomes a 500. No stack traces or internal details are exposed to clients.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .domain.exceptions import (
    EmployeeNotFoundException,
    EmployeeServiceException,
    InvalidInputException,
    ServiceUnavailableException,
)
from .logging_config import get_request_id

logger = structlog.get_logger(__name__)

STATUS_BY_EXCEPTION = {
    InvalidInputException: status.HTTP_400_BAD_REQUEST,
    EmployeeNotFoundException: status.HTTP_404_NOT_FOUND,
    ServiceUnavailableException: status.HTTP_503_SERVICE_UNAVAILABLE,
}

SERVICE_UNAVAILABLE_MESSAGE = "Service temporarily unavailable. Please try again later."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."


def status_for(exc: Exception) -> int:
    """HTTP status for an exception, 500 when it is not part of the taxonomy."""
    for exception_type, status_code in STATUS_BY_EXCEPTION.items():
        if isinstance(exc, exception_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Build a consistent JSON error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "details": details or {},
            "request_id": get_request_id() or request.headers.get("X-Request-ID"),
        },
    )


def unexpected_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unclassified exception and build the generic 500 response."""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=exc,
    )
    return _error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_server_error",
        UNEXPECTED_ERROR_MESSAGE,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(EmployeeServiceException)
    async def handle_employee_service_exception(
        request: Request, exc: EmployeeServiceException
    ) -> JSONResponse:
        """Translate taxonomy exceptions to their status codes."""
        status_code = status_for(exc)

        if status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
            logger.error(
                "Service error",
                path=request.url.path,
                method=request.method,
                error=exc.message,
                cause=repr(exc.__cause__) if exc.__cause__ else None,
            )
            return _error_response(request, status_code, exc.error_code, SERVICE_UNAVAILABLE_MESSAGE)

        if status_code == status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Unclassified service error",
                path=request.url.path,
                method=request.method,
                error=exc.message,
            )
            return _error_response(request, status_code, "internal_server_error", UNEXPECTED_ERROR_MESSAGE)

        logger.warning(
            "Request rejected",
            path=request.url.path,
            method=request.method,
            error_code=exc.error_code,
            error=exc.message,
        )
        return _error_response(request, status_code, exc.error_code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Reject invalid request bodies and parameters with 400."""
        errors: Dict[str, str] = {}
        for error in exc.errors():
            location = error.get("loc", ())
            field = str(location[-1]) if location else "request"
            errors[field] = error.get("msg", "Invalid value")

        logger.warning("Validation error", path=request.url.path, errors=errors)
        return _error_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            InvalidInputException.error_code,
            "Request validation failed",
            errors,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
        """Handle all unhandled exceptions."""
        return unexpected_error_response(request, exc)
