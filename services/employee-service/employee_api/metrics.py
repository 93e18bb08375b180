"""
Prometheus metrics for Employee Service.

Tracks inbound HTTP traffic, upstream mock API calls and retries, and cache usage.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "employee_api_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "employee_api_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

# Upstream metrics
upstream_requests_total = Counter(
    "employee_api_upstream_requests_total",
    "Total calls to the mock employee API",
    ["operation", "outcome"],
)

upstream_request_duration_seconds = Histogram(
    "employee_api_upstream_request_duration_seconds",
    "Upstream call duration in seconds, retries included",
    ["operation"],
    buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
)

upstream_retries_total = Counter(
    "employee_api_upstream_retries_total",
    "Total retried upstream attempts",
    ["operation"],
)

# Cache metrics
cache_operations_total = Counter(
    "employee_api_cache_operations_total",
    "Employee cache lookups",
    ["result"],
)


def metrics_response() -> Response:
    """Render all registered metrics in Prometheus exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
