"""
Health check and monitoring router.

Provides endpoints for liveness probes and cache statistics.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from .. import __version__
from ..config import settings
from ..dependencies import get_employee_service
from ..services.employee_service import EmployeeService

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str
    service: str = "employee-service"
    version: str = __version__


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Basic health check endpoint - returns 200 if service is running",
)
async def health_check():
    """
    Basic health check.

    Always returns 200 OK if the service is running; the upstream employee
    API is not probed.
    """
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc).isoformat())


@router.get(
    f"{settings.API_PREFIX}/cache/stats",
    summary="Cache statistics",
    description="Get statistics for the in-memory employee cache",
)
async def cache_stats(service: EmployeeService = Depends(get_employee_service)):
    """Statistics of the employee cache, or a disabled marker when caching is off."""
    if service.cache is None:
        return {"timestamp": datetime.now(timezone.utc).isoformat(), "enabled": False}

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "enabled": True,
        "memory": service.cache.get_stats(),
    }
