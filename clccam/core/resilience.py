"""
Resilience Infrastructure.

Retrying transport for the CAM REST client. Transient failures are retried
below the request engine, so every call made through a client configured
with Retryer() gets the same policy:

    Client → RetryTransport (tenacity) → HTTPTransport → network

An attempt is retried when it raised a transport error (no response at all)
or returned one of the retryable statuses, as long as the attempt budget and
the overall deadline allow it. Delays follow full-jitter exponential backoff
starting at the step delay and capped by the deadline.

Usage:
    from clccam.core.resilience import RetryTransport

    transport = RetryTransport(httpx.HTTPTransport(), max_retries=3,
                               step_delay=1.0, max_timeout=180.0)
    client = httpx.Client(transport=transport, timeout=180.0)
"""

import time
from collections.abc import Callable
from typing import Any

import httpx
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    retry_if_result,
    stop_after_attempt,
    stop_before_delay,
    wait_random_exponential,
)

from clccam.core.logging import get_logger

logger = get_logger(__name__)

RETRYABLE_STATUS = frozenset({
    408,  # Request Timeout
    500,  # Internal Server Error
    502,  # Bad Gateway
    503,  # Service Unavailable
    504,  # Gateway Timeout
})

# Key under which the engine attaches its cancellation context to a request.
CANCEL_EXTENSION = "clccam.cancel"


def is_retryable(response: httpx.Response) -> bool:
    """Return True if the response carries a retryable status."""
    return response.status_code in RETRYABLE_STATUS


def is_cancelled(request: httpx.Request) -> bool:
    """Return True if the cancellation context attached to the request has fired."""
    ctx = request.extensions.get(CANCEL_EXTENSION)
    return ctx is not None and ctx.cancelled


def log_retry(retry_state: RetryCallState) -> None:
    """Tenacity before_sleep callback that emits structured retry events.

    Identifies the request, the reason for the retry and the (1-indexed)
    number of the attempt that failed.

    Args:
        retry_state: tenacity.RetryCallState instance
    """
    request: httpx.Request = retry_state.args[0]
    outcome = retry_state.outcome
    attempt = retry_state.attempt_number

    if outcome is not None and outcome.failed:
        error = str(outcome.exception()) or type(outcome.exception()).__name__
        logger.warning(
            f"{request.method} {request.url.path} failed ({error}) - retry #{attempt}",
            extra={
                "resilience_event": "retry_attempt",
                "method": request.method,
                "path": request.url.path,
                "attempt": attempt,
                "error": error,
            },
        )
        return

    response: httpx.Response | None = outcome.result() if outcome is not None else None
    status = f"{response.status_code} {response.reason_phrase}" if response is not None else None
    logger.warning(
        f"{request.method} {request.url.path} returned {status!r} - retry #{attempt}",
        extra={
            "resilience_event": "retry_attempt",
            "method": request.method,
            "path": request.url.path,
            "attempt": attempt,
            "status_code": response.status_code if response is not None else None,
        },
    )


def _before_retry(retry_state: RetryCallState) -> None:
    """Release a discarded response, then log the retry."""
    outcome = retry_state.outcome
    if outcome is not None and not outcome.failed:
        outcome.result().close()
    log_retry(retry_state)


def _stop_if_cancelled(retry_state: RetryCallState) -> bool:
    return is_cancelled(retry_state.args[0])


def _last_outcome(retry_state: RetryCallState) -> Any:
    """Return the final response, or re-raise the final transport error."""
    return retry_state.outcome.result()


class DeadlineExceeded(httpx.TimeoutException):
    """The overall deadline of a request, retries included, has passed."""


class RetryTransport(httpx.BaseTransport):
    """
    Transport wrapper that retries transient failures.

    All attempts of one request share a single deadline of max_timeout
    seconds. Each attempt gets the remaining time as its httpx timeout, and
    an attempt that completes after the deadline fails with DeadlineExceeded
    whatever its outcome.

    Attributes:
        transport: The wrapped transport performing the actual I/O
        max_retries: Maximum number of attempts per request
        step_delay: Base delay (seconds) of the exponential backoff
        max_timeout: Overall deadline (seconds) of a request and its retries
    """

    def __init__(
        self,
        transport: httpx.BaseTransport,
        max_retries: int,
        step_delay: float,
        max_timeout: float,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.transport = transport
        self.max_retries = max_retries
        self.step_delay = step_delay
        self.max_timeout = max_timeout
        self._sleep = sleep
        self._clock = clock

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=(
                stop_after_attempt(self.max_retries)
                | stop_before_delay(self.max_timeout)
                | _stop_if_cancelled
            ),
            wait=wait_random_exponential(multiplier=self.step_delay, max=self.max_timeout),
            retry=(
                (retry_if_exception_type(httpx.TransportError)
                 & retry_if_not_exception_type(DeadlineExceeded))
                | retry_if_result(is_retryable)
            ),
            before_sleep=_before_retry,
            retry_error_callback=_last_outcome,
            sleep=self._sleep,
        )

    def _attempt(self, request: httpx.Request, deadline: float) -> httpx.Response:
        remaining = deadline - self._clock()
        if remaining <= 0:
            raise DeadlineExceeded(
                f"{request.method} {request.url.path} exceeded {self.max_timeout}s", request=request
            )

        timeouts = request.extensions.get("timeout") or {}
        request.extensions["timeout"] = {
            key: remaining if timeouts.get(key) is None else min(timeouts[key], remaining)
            for key in ("connect", "read", "write", "pool")
        }

        response = self.transport.handle_request(request)
        if self._clock() > deadline:
            response.close()
            raise DeadlineExceeded(
                f"{request.method} {request.url.path} exceeded {self.max_timeout}s", request=request
            )
        return response

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        deadline = self._clock() + self.max_timeout
        return self._retrying()(self._attempt, request, deadline)

    def close(self) -> None:
        self.transport.close()
