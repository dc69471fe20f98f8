"""Retry policy for page fetches, built on tenacity."""

from collections.abc import Callable
from typing import Any

import logfire
from tenacity import BaseRetrying, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from newsel.exceptions import FetchError


def get_retryer(
    max_attempts: int = 2,
    wait_min: float = 1.0,
    wait_max: float = 10.0,
    exceptions: tuple[type[BaseException], ...] = (FetchError,),
    log_callback: Callable[[Any], None] | None = None,
) -> BaseRetrying:
    """Build the retry loop used around fetches.

    Waits grow exponentially between ``wait_min`` and ``wait_max``. After the
    last attempt the original exception is raised, never a RetryError.

    Args:
        max_attempts: Total attempts, including the first one
        wait_min: Shortest wait between attempts in seconds
        wait_max: Longest wait between attempts in seconds
        exceptions: Exception types that trigger another attempt
        log_callback: before_sleep hook; defaults to ``log_retry``

    """
    return Retrying(
        stop=stop_after_attempt(max(1, max_attempts)),
        wait=wait_exponential(min=wait_min, max=wait_max),
        retry=retry_if_exception_type(exceptions),
        before_sleep=log_callback or log_retry,
        reraise=True,
    )


def log_retry(retry_state: Any) -> None:
    """Emit a logfire warning before the next attempt."""
    outcome = retry_state.outcome
    error = outcome.exception() if outcome is not None else None
    logfire.warn('Retrying fetch', attempt=retry_state.attempt_number, error=str(error) if error else 'unknown')
