"""
Unit Tests for the Retrying Transport.

Requests are served by httpx.MockTransport; sleeping is disabled so the
backoff schedule does not slow the tests down.
"""

from unittest.mock import patch

import httpx
import pytest

from clccam.client.options import CancelContext
from clccam.core.resilience import (
    CANCEL_EXTENSION,
    RETRYABLE_STATUS,
    DeadlineExceeded,
    RetryTransport,
    is_cancelled,
    is_retryable,
)


def _no_sleep(seconds: float) -> None:
    pass


def _client(handler, max_retries: int = 3, max_timeout: float = 60.0) -> httpx.Client:
    transport = RetryTransport(
        httpx.MockTransport(handler),
        max_retries=max_retries,
        step_delay=0.01,
        max_timeout=max_timeout,
        sleep=_no_sleep,
    )
    return httpx.Client(transport=transport, base_url="https://cam.example.com")


def _sequence(*statuses: int):
    """Handler answering with statuses in order, the last one repeated."""
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(statuses[min(len(calls), len(statuses)) - 1])

    return handler, calls


class TestRetryPredicates:
    """Tests for is_retryable and is_cancelled."""

    @pytest.mark.parametrize("status", sorted(RETRYABLE_STATUS))
    def test_retryable_statuses(self, status):
        assert is_retryable(httpx.Response(status))

    @pytest.mark.parametrize("status", [200, 204, 400, 401, 404, 409, 501])
    def test_non_retryable_statuses(self, status):
        assert not is_retryable(httpx.Response(status))

    def test_request_without_context_is_not_cancelled(self):
        assert not is_cancelled(httpx.Request("GET", "https://cam.example.com/"))

    def test_request_with_signalled_context(self):
        ctx = CancelContext()
        request = httpx.Request("GET", "https://cam.example.com/")
        request.extensions[CANCEL_EXTENSION] = ctx
        assert not is_cancelled(request)
        ctx.cancel()
        assert is_cancelled(request)


class TestRetryTransport:
    """Tests for the retry loop."""

    def test_success_is_not_retried(self):
        handler, calls = _sequence(200)
        with _client(handler) as client:
            response = client.get("/services/boxes")
        assert response.status_code == 200
        assert len(calls) == 1

    def test_retries_until_success(self):
        handler, calls = _sequence(503, 503, 200)
        with _client(handler) as client:
            response = client.get("/services/boxes")
        assert response.status_code == 200
        assert len(calls) == 3

    def test_returns_last_response_when_attempts_exhausted(self):
        handler, calls = _sequence(503)
        with _client(handler) as client:
            response = client.get("/services/boxes")
        assert response.status_code == 503
        assert len(calls) == 3

    def test_client_errors_are_not_retried(self):
        handler, calls = _sequence(404)
        with _client(handler) as client:
            response = client.get("/services/boxes/missing")
        assert response.status_code == 404
        assert len(calls) == 1

    def test_transport_error_is_retried_then_raised(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        with _client(handler) as client:
            with pytest.raises(httpx.ConnectError):
                client.get("/services/boxes")
        assert len(calls) == 3

    def test_transport_error_then_success(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json=[])

        with _client(handler) as client:
            response = client.get("/services/boxes")
        assert response.json() == []
        assert len(calls) == 2

    def test_single_attempt_budget(self):
        handler, calls = _sequence(500)
        with _client(handler, max_retries=1) as client:
            response = client.get("/services/boxes")
        assert response.status_code == 500
        assert len(calls) == 1

    def test_cancellation_stops_retrying(self):
        ctx = CancelContext()
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            ctx.cancel()
            return httpx.Response(503)

        with _client(handler, max_retries=5) as client:
            request = client.build_request("GET", "/services/boxes")
            request.extensions[CANCEL_EXTENSION] = ctx
            response = client.send(request)
        assert response.status_code == 503
        assert len(calls) == 1


class TestRetryLogging:
    """Tests for the structured retry events."""

    def test_logs_each_retry(self):
        handler, _ = _sequence(503, 502, 200)
        with patch("clccam.core.resilience.logger") as mock_logger:
            with _client(handler) as client:
                client.get("/services/boxes")

        assert mock_logger.warning.call_count == 2
        first = mock_logger.warning.call_args_list[0]
        extra = first[1]["extra"]
        assert extra["resilience_event"] == "retry_attempt"
        assert extra["method"] == "GET"
        assert extra["path"] == "/services/boxes"
        assert extra["attempt"] == 1
        assert extra["status_code"] == 503
        assert "retry #1" in first[0][0]

        second = mock_logger.warning.call_args_list[1][1]["extra"]
        assert second["attempt"] == 2
        assert second["status_code"] == 502

    def test_logs_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with patch("clccam.core.resilience.logger") as mock_logger:
            with _client(handler, max_retries=2) as client:
                with pytest.raises(httpx.ConnectError):
                    client.get("/services/instances")

        mock_logger.warning.assert_called_once()
        extra = mock_logger.warning.call_args[1]["extra"]
        assert extra["resilience_event"] == "retry_attempt"
        assert extra["error"] == "connection refused"

    def test_no_log_without_retry(self):
        handler, _ = _sequence(200)
        with patch("clccam.core.resilience.logger") as mock_logger:
            with _client(handler) as client:
                client.get("/services/boxes")
        mock_logger.warning.assert_not_called()


class FakeClock:
    """Monotonic clock advanced by the handlers instead of by real time."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _slow_sequence(clock: FakeClock, seconds: float, *statuses: int):
    """Handler taking seconds per attempt, answering with statuses in order."""
    calls = []
    timeouts = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        timeouts.append(request.extensions["timeout"]["read"])
        clock.now += seconds
        return httpx.Response(statuses[min(len(calls), len(statuses)) - 1])

    return handler, calls, timeouts


def _deadline_client(handler, clock: FakeClock, max_timeout: float = 1.0) -> httpx.Client:
    transport = RetryTransport(
        httpx.MockTransport(handler),
        max_retries=3,
        step_delay=0.01,
        max_timeout=max_timeout,
        sleep=_no_sleep,
        clock=clock,
    )
    return httpx.Client(transport=transport, base_url="https://cam.example.com", timeout=max_timeout)


class TestOverallDeadline:
    """Tests for the single deadline shared by all attempts."""

    def test_success_after_deadline_is_a_timeout(self):
        clock = FakeClock()
        handler, calls, _ = _slow_sequence(clock, 0.45, 503, 503, 200)
        with _deadline_client(handler, clock) as client:
            with pytest.raises(httpx.TimeoutException):
                client.get("/services/boxes")
        assert len(calls) == 3

    def test_deadline_exceeded_is_not_retried(self):
        clock = FakeClock()
        handler, calls, _ = _slow_sequence(clock, 1.5, 503)
        with _deadline_client(handler, clock) as client:
            with pytest.raises(DeadlineExceeded):
                client.get("/services/boxes")
        assert len(calls) == 1

    def test_attempts_get_the_remaining_time(self):
        clock = FakeClock()
        handler, _, timeouts = _slow_sequence(clock, 0.25, 503, 503, 200)
        with _deadline_client(handler, clock) as client:
            response = client.get("/services/boxes")
        assert response.status_code == 200
        assert timeouts == [pytest.approx(1.0), pytest.approx(0.75), pytest.approx(0.5)]

    def test_client_timeout_lower_than_remaining_is_kept(self):
        clock = FakeClock()
        handler, _, timeouts = _slow_sequence(clock, 0.0, 200)
        transport = RetryTransport(
            httpx.MockTransport(handler), max_retries=3, step_delay=0.01,
            max_timeout=60.0, sleep=_no_sleep, clock=clock,
        )
        with httpx.Client(transport=transport, base_url="https://cam.example.com", timeout=5.0) as client:
            client.get("/services/boxes")
        assert timeouts == [5.0]
