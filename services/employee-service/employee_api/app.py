"""
Main FastAPI application.

This file wires together all layers:
- Domain: Employee entity, aggregations and error taxonomy
- Infrastructure: Upstream employee API client and retry policy
- Cache: Injected in-memory employee store
- Services: Business logic orchestration
- Routers: HTTP endpoints
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .cache.memory_cache import EmployeeCache
from .config import Settings, settings
from .dependencies import set_employee_service
from .exception_handlers import register_exception_handlers, unexpected_error_response
from .infrastructure.mock_employee_client import MockEmployeeAPIClient
from .infrastructure.retry import RetryPolicy
from .logging_config import bind_request_id, clear_request_context, setup_logging
from .metrics import http_request_duration_seconds, http_requests_total, metrics_response
from .routers import employee_router, health_router
from .services.employee_service import EmployeeService

setup_logging(log_level=settings.LOG_LEVEL, use_json=settings.LOG_JSON)

logger = structlog.get_logger(__name__)

# Global state
api_client: Optional[MockEmployeeAPIClient] = None


def create_employee_service(
    config: Settings, client: Optional[MockEmployeeAPIClient] = None
) -> EmployeeService:
    """
    Create and configure the employee service with all dependencies.

    Args:
        config: Application settings
        client: Upstream client to use, built from settings when omitted

    Returns:
        Configured EmployeeService instance
    """
    if client is None:
        retry_policy = RetryPolicy(
            max_attempts=config.MAX_RETRY_ATTEMPTS,
            initial_backoff=config.RETRY_INITIAL_BACKOFF,
            multiplier=config.RETRY_BACKOFF_MULTIPLIER,
            max_backoff=config.RETRY_MAX_BACKOFF,
        )
        client = MockEmployeeAPIClient(
            base_url=config.EMPLOYEE_API_BASE_URL,
            connect_timeout=config.CONNECT_TIMEOUT,
            read_timeout=config.READ_TIMEOUT,
            retry_policy=retry_policy,
        )

    cache = EmployeeCache(max_size=config.CACHE_MAX_SIZE) if config.CACHE_ENABLED else None

    return EmployeeService(api_client=client, cache=cache)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global api_client

    logger.info("Starting Employee Service...", upstream=settings.EMPLOYEE_API_BASE_URL)

    try:
        employee_service = create_employee_service(settings)
        api_client = employee_service.api_client
        set_employee_service(employee_service)
        logger.info("Employee service initialized", cache_enabled=settings.CACHE_ENABLED)
    except Exception as e:
        logger.error("Failed to initialize employee service", error=str(e))
        raise

    yield

    # Shutdown
    logger.info("Shutting down Employee Service...")

    if api_client is not None:
        await api_client.close()
        api_client = None
        logger.info("Upstream HTTP client closed")

    set_employee_service(None)
    logger.info("Employee Service shut down complete")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="REST facade over the mock employee API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
    openapi_url="/api/openapi.json",
)


# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request ID middleware
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    """Add request ID for distributed tracing."""
    request_id = bind_request_id(request.headers.get("X-Request-ID"))

    try:
        response = await call_next(request)
    except Exception as exc:
        response = unexpected_error_response(request, exc)
    finally:
        clear_request_context()

    response.headers["X-Request-ID"] = request_id
    return response


# Metrics middleware
@app.middleware("http")
async def track_metrics(request: Request, call_next):
    """Track Prometheus metrics."""
    start_time = time.perf_counter()
    status_code = 500

    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        duration = time.perf_counter() - start_time

        http_requests_total.labels(
            method=request.method, endpoint=endpoint, status=status_code
        ).inc()
        http_request_duration_seconds.labels(
            method=request.method, endpoint=endpoint
        ).observe(duration)


register_exception_handlers(app)

# Include routers
app.include_router(employee_router.router)
app.include_router(health_router.router)


# Prometheus metrics endpoint
@app.get("/metrics", include_in_schema=False)
async def metrics():
    """Prometheus metrics endpoint."""
    return metrics_response()


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": settings.APP_NAME,
        "version": __version__,
        "status": "operational",
        "employees": f"{settings.API_PREFIX}/employee",
        "health": "/health",
    }


def main() -> None:
    """Run the service with uvicorn."""
    import uvicorn

    uvicorn.run(
        "employee_api.app:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
