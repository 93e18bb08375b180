"""
Retry policy for upstream calls.

Wraps tenacity in an explicit, injectable policy object so that the number of
attempts, the backoff schedule and the retryable predicate are visible and
testable in isolation from the HTTP client.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from ..metrics import upstream_retries_total

logger = structlog.get_logger(__name__)

T = TypeVar("T")

# Retry constants
MAX_RETRY_ATTEMPTS = 3
RETRY_INITIAL_BACKOFF_SECONDS = 1.0
RETRY_BACKOFF_MULTIPLIER = 2.0
RETRY_MAX_BACKOFF_SECONDS = 4.0

HTTP_TOO_MANY_REQUESTS = 429
HTTP_SERVER_ERROR_MIN = 500


def is_transient_error(error: BaseException) -> bool:
    """
    Decide whether a failed upstream attempt is worth retrying.

    Transport failures (connect errors, timeouts, broken connections), server
    errors and rate limiting are transient. Not-found and every other client
    error are not.
    """
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        return status_code >= HTTP_SERVER_ERROR_MIN or status_code == HTTP_TOO_MANY_REQUESTS
    return isinstance(error, httpx.RequestError)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry policy with exponential backoff.

    Attributes:
        max_attempts: Total attempts, the first call included
        initial_backoff: Wait before the second attempt in seconds
        multiplier: Factor applied to the wait after every further attempt
        max_backoff: Ceiling for a single wait in seconds
        retryable: Predicate selecting which failures are retried
    """

    max_attempts: int = MAX_RETRY_ATTEMPTS
    initial_backoff: float = RETRY_INITIAL_BACKOFF_SECONDS
    multiplier: float = RETRY_BACKOFF_MULTIPLIER
    max_backoff: float = RETRY_MAX_BACKOFF_SECONDS
    retryable: Callable[[BaseException], bool] = is_transient_error

    def __post_init__(self):
        """Validate policy values."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.initial_backoff < 0 or self.max_backoff < 0:
            raise ValueError("Backoff values cannot be negative")

    def backoff_schedule(self) -> List[float]:
        """Waits between consecutive attempts, in seconds."""
        return [
            min(self.max_backoff, self.initial_backoff * self.multiplier**attempt)
            for attempt in range(self.max_attempts - 1)
        ]

    def build(self, operation: str = "upstream") -> AsyncRetrying:
        """
        Create a tenacity controller for one call.

        Args:
            operation: Name used in retry logs and metrics

        Returns:
            AsyncRetrying that re-raises the last failure once exhausted
        """

        def _before_sleep(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            upstream_retries_total.labels(operation=operation).inc()
            logger.warning(
                "Retrying upstream call",
                operation=operation,
                attempt=retry_state.attempt_number,
                max_attempts=self.max_attempts,
                wait_seconds=retry_state.next_action.sleep if retry_state.next_action else None,
                error_type=type(error).__name__ if error else None,
                error=str(error) if error else None,
            )

        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.initial_backoff,
                exp_base=self.multiplier,
                min=0,
                max=self.max_backoff,
            ),
            retry=retry_if_exception(self.retryable),
            before_sleep=_before_sleep,
            reraise=True,
        )


async def call_with_retry(
    operation: Callable[..., Awaitable[T]],
    policy: RetryPolicy,
    *args: Any,
    name: Optional[str] = None,
    **kwargs: Any,
) -> T:
    """
    Run an async operation under a retry policy.

    Args:
        operation: Coroutine function performing one attempt
        policy: Retry policy to apply
        *args: Positional arguments for the operation
        name: Operation name for logs and metrics (defaults to the function name)
        **kwargs: Keyword arguments for the operation

    Returns:
        The operation result from the first successful attempt

    Raises:
        Exception: The last failure, unchanged, when it is not retryable or
            attempts are exhausted
    """
    operation_name = name or getattr(operation, "__name__", "upstream")

    async for attempt in policy.build(operation_name):
        with attempt:
            return await operation(*args, **kwargs)

    raise RuntimeError(f"Retry loop for {operation_name} ended without a result")
