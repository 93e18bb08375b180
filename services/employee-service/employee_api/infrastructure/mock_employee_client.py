"""
HTTP client for the mock employee API.

Issues calls to the upstream employee data service through a persistent
httpx client, applies the retry policy to transient failures and surfaces a
distinct not-found signal for single-resource lookups.
"""

import time
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel

from ..config import settings
from ..logging_config import get_request_id
from ..metrics import upstream_request_duration_seconds, upstream_requests_total
from ..models import CreateEmployeeRequest, DeleteEmployeeRequest, EmployeeSchema, UpstreamResponse
from .employee_api_client import IEmployeeAPIClient, UpstreamNotFoundError
from .retry import RetryPolicy, call_with_retry

logger = structlog.get_logger(__name__)

EnvelopeT = TypeVar("EnvelopeT", bound=BaseModel)

HTTP_NOT_FOUND = 404
NO_EMPLOYEES_STATUS = "No employees found"


def _is_not_found(error: httpx.HTTPStatusError) -> bool:
    return error.response.status_code == HTTP_NOT_FOUND


def _path_segment(value: str) -> str:
    """Percent-encode a value as one URL path segment, dot segments included."""
    segment = quote(value, safe="")
    if segment in (".", ".."):
        segment = segment.replace(".", "%2E")
    return segment


class MockEmployeeAPIClient(IEmployeeAPIClient):
    """
    Client for the mock employee API.

    Uses a persistent HTTP client with connection pooling. Every call runs
    under the injected retry policy; each attempt is bounded by the connect
    and read timeouts.

    Attributes:
        base_url: Base URL of the employee resource on the upstream service
        timeout: Per-attempt httpx timeout
        retry_policy: Policy applied to every upstream call
        _client: Persistent httpx.AsyncClient, created lazily
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the upstream client.

        Args:
            base_url: Base URL of the employee resource (defaults to settings)
            connect_timeout: Connect timeout in seconds (defaults to settings)
            read_timeout: Read timeout in seconds (defaults to settings)
            retry_policy: Retry policy (defaults to three attempts, 1s then 2s)
            transport: Optional httpx transport, used to stub the network
        """
        self.base_url = (base_url or settings.EMPLOYEE_API_BASE_URL).rstrip("/")
        self.timeout = httpx.Timeout(
            read_timeout or settings.READ_TIMEOUT,
            connect=connect_timeout or settings.CONNECT_TIMEOUT,
        )
        self.retry_policy = retry_policy or RetryPolicy()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

        logger.info(
            "Initialized MockEmployeeAPIClient",
            base_url=self.base_url,
            connect_timeout=self.timeout.connect,
            read_timeout=self.timeout.read,
            max_attempts=self.retry_policy.max_attempts,
            backoff_schedule=self.retry_policy.backoff_schedule(),
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the persistent HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                limits=httpx.Limits(
                    max_keepalive_connections=20,
                    max_connections=100,
                    keepalive_expiry=30.0,
                ),
                transport=self._transport,
            )
            logger.debug("Created new HTTP client with connection pooling")
        return self._client

    async def close(self) -> None:
        """
        Close the HTTP client and release connections.

        Should be called during application shutdown.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
            logger.debug("Closed HTTP client")

    def _get_request_headers(self) -> Dict[str, str]:
        """Common request headers, including the request ID for tracing."""
        headers = {
            "User-Agent": "Employee-API/1.0",
            "Accept": "application/json",
        }

        request_id = get_request_id()
        if request_id:
            headers["X-Request-ID"] = request_id

        return headers

    async def _send(
        self, method: str, url: str, json: Optional[Dict[str, Any]] = None
    ) -> httpx.Response:
        """Perform a single attempt; any non-2xx status raises HTTPStatusError."""
        client = await self._get_client()
        response = await client.request(
            method, url, json=json, headers=self._get_request_headers()
        )
        response.raise_for_status()
        return response

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Perform an upstream call under the retry policy.

        Args:
            operation: Operation name for logs and metrics
            method: HTTP method
            url: Absolute request URL
            json: Optional JSON body

        Returns:
            Decoded JSON body, or None when the body is empty

        Raises:
            httpx.HTTPStatusError: On a non-retryable status or exhausted retries
            httpx.RequestError: On transport failure after exhausted retries
            ValueError: On a successful response whose body is not JSON
        """
        start_time = time.perf_counter()
        outcome = "success"

        try:
            response = await call_with_retry(
                self._send, self.retry_policy, method, url, json=json, name=operation
            )
            if not response.content:
                return None

            try:
                return response.json()
            except ValueError:
                outcome = "decode_error"
                logger.error(
                    "Employee API returned a non-JSON body",
                    operation=operation,
                    url=url,
                    content_type=response.headers.get("content-type"),
                )
                raise

        except httpx.HTTPStatusError as error:
            outcome = "not_found" if _is_not_found(error) else "http_error"
            log = logger.warning if _is_not_found(error) else logger.error
            log(
                "HTTP error from employee API",
                operation=operation,
                url=url,
                status_code=error.response.status_code,
                response_body=error.response.text[:500],
            )
            raise

        except httpx.RequestError as error:
            outcome = "transport_error"
            logger.error(
                "Request error communicating with employee API",
                operation=operation,
                url=url,
                error_type=type(error).__name__,
                error_message=str(error),
            )
            raise

        finally:
            duration = time.perf_counter() - start_time
            upstream_requests_total.labels(operation=operation, outcome=outcome).inc()
            upstream_request_duration_seconds.labels(operation=operation).observe(duration)

    @staticmethod
    def _parse(payload: Any, model: Type[EnvelopeT]) -> Optional[EnvelopeT]:
        """Validate a decoded body into an envelope; None stays None."""
        if payload is None:
            return None
        envelope = model.model_validate(payload)
        if not envelope.is_successful:
            logger.warning(
                "Employee API returned an unsuccessful envelope",
                status=envelope.status,
                error=envelope.error,
                has_data=envelope.data is not None,
            )
        return envelope

    async def get_all_employees(self) -> Optional[UpstreamResponse[List[EmployeeSchema]]]:
        """Fetch every employee; an upstream 404 is an empty result, not an error."""
        logger.info("Fetching all employees from employee API")

        try:
            payload = await self._request("get_all_employees", "GET", self.base_url)
        except httpx.HTTPStatusError as error:
            if not _is_not_found(error):
                raise
            logger.warning("No employees found in employee API")
            return UpstreamResponse[List[EmployeeSchema]](data=[], status=NO_EMPLOYEES_STATUS)

        envelope = self._parse(payload, UpstreamResponse[List[EmployeeSchema]])
        logger.info(
            "Retrieved employees",
            count=len(envelope.data) if envelope and envelope.data else 0,
        )
        return envelope

    async def get_employee_by_id(
        self, employee_id: str
    ) -> Optional[UpstreamResponse[EmployeeSchema]]:
        """Fetch one employee; an upstream 404 raises UpstreamNotFoundError."""
        logger.info("Fetching employee", employee_id=employee_id)

        try:
            payload = await self._request(
                "get_employee_by_id", "GET", f"{self.base_url}/{_path_segment(employee_id)}"
            )
        except httpx.HTTPStatusError as error:
            if _is_not_found(error):
                raise UpstreamNotFoundError(f"employee/{employee_id}") from error
            raise

        return self._parse(payload, UpstreamResponse[EmployeeSchema])

    async def create_employee(
        self, request: CreateEmployeeRequest
    ) -> Optional[UpstreamResponse[EmployeeSchema]]:
        """Create an employee from a validated request."""
        logger.info("Creating employee", name=request.name)

        payload = await self._request(
            "create_employee", "POST", self.base_url, json=request.model_dump()
        )
        return self._parse(payload, UpstreamResponse[EmployeeSchema])

    async def delete_employee(self, name: str) -> Optional[UpstreamResponse[bool]]:
        """Delete an employee by name; an upstream 404 raises UpstreamNotFoundError."""
        logger.info("Deleting employee", name=name)
        body = DeleteEmployeeRequest(name=name)

        try:
            payload = await self._request(
                "delete_employee", "DELETE", self.base_url, json=body.model_dump()
            )
        except httpx.HTTPStatusError as error:
            if _is_not_found(error):
                raise UpstreamNotFoundError(f"employee named {name}") from error
            raise

        return self._parse(payload, UpstreamResponse[bool])
