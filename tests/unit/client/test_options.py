"""
Unit Tests for Client and Request Options.
"""

import httpx
import pytest

from clccam.client.client import Client
from clccam.client.options import (
    CancelContext,
    debug,
    headers,
    host_url,
    insecure_tls,
    json_response,
    normalize_base_url,
    query,
    request_options,
    retryer,
    with_context,
)
from clccam.core.exceptions import ConfigurationError
from clccam.core.resilience import RetryTransport


class TestNormalizeBaseUrl:
    """Tests for turning hosts into base URLs."""

    @pytest.mark.parametrize(
        "host,expected",
        [
            ("cam.ctl.io", "https://cam.ctl.io"),
            ("cam.ctl.io/", "https://cam.ctl.io"),
            ("https://cam.example.com/", "https://cam.example.com"),
            ("http://cam.example.com", "https://cam.example.com"),
            ("10.50.1.2:8443", "https://10.50.1.2:8443"),
            ("https://cam.example.com/api/", "https://cam.example.com/api"),
            ("  cam.ctl.io  ", "https://cam.ctl.io"),
        ],
    )
    def test_variants(self, host, expected):
        assert normalize_base_url(host) == expected

    def test_missing_host(self):
        with pytest.raises(ConfigurationError, match="missing host"):
            normalize_base_url("https:///services")


class TestClientOptions:
    """Tests for options applied to a Client."""

    def test_host_url(self):
        assert Client(host_url("cam.example.com")).base_url == "https://cam.example.com"

    def test_empty_host_keeps_default(self):
        assert Client(host_url("")).base_url == "https://cam.ctl.io"

    def test_later_option_wins(self):
        client = Client(host_url("one.example.com"), host_url("two.example.com"))
        assert client.base_url == "https://two.example.com"

    def test_retryer_wraps_transport_and_sets_timeout(self):
        client = Client(retryer(5, 0.5, 30.0))
        assert isinstance(client.transport, RetryTransport)
        assert client.transport.max_retries == 5
        assert client.transport.step_delay == 0.5
        assert client.transport.max_timeout == 30.0
        assert client.timeout == 30.0

    def test_retryer_replaces_previous_policy(self):
        client = Client(retryer(5, 0.5, 30.0), retryer(2, 1.0, 60.0))
        assert isinstance(client.transport, RetryTransport)
        assert not isinstance(client.transport.transport, RetryTransport)
        assert client.transport.max_retries == 2

    def test_insecure_tls_replaces_http_transport(self):
        client = Client()
        original = client.transport
        client.with_options(insecure_tls(True))
        assert isinstance(client.transport, httpx.HTTPTransport)
        assert client.transport is not original

    def test_insecure_tls_after_retryer(self):
        client = Client(retryer(3, 1.0, 180.0))
        retrying = client.transport
        inner = retrying.transport

        client.with_options(insecure_tls(True))

        assert client.transport is retrying
        assert type(retrying.transport) is httpx.HTTPTransport
        assert retrying.transport is not inner

    def test_insecure_tls_on_opaque_transport_fails(self):
        client = Client()
        client.transport = httpx.MockTransport(lambda request: httpx.Response(204))
        with pytest.raises(ConfigurationError, match="unable to access http client transport"):
            client.with_options(insecure_tls(True))

    def test_insecure_tls_on_retried_opaque_transport_fails(self):
        client = Client()
        client.transport = httpx.MockTransport(lambda request: httpx.Response(204))
        client.with_options(retryer(3, 1.0, 180.0))
        with pytest.raises(ConfigurationError, match="unable to access http client transport"):
            client.with_options(insecure_tls(True))

    def test_debug_and_json_response(self):
        client = Client(debug(True), json_response(True))
        assert client.request_debug is True
        assert client.json_response is True

    def test_with_context(self):
        ctx = CancelContext()
        assert Client(with_context(ctx)).ctx is ctx
        assert Client().with_context(None).ctx is None

    def test_request_options_accumulate(self):
        first, second = headers({"A": "1"}), headers({"B": "2"})
        client = Client(request_options(first), request_options(second))
        assert client.request_options == [first, second]


class TestRequestOptions:
    """Tests for options applied to outgoing requests."""

    def test_headers_set_and_override(self):
        request = httpx.Request("GET", "https://cam.ctl.io/x", headers={"A": "old"})
        headers({"A": "new", "B": "2"})(request)
        assert request.headers["A"] == "new"
        assert request.headers["B"] == "2"

    def test_query_merges_params(self):
        request = httpx.Request("GET", "https://cam.ctl.io/services/instances/i-1?machine_name=m1")
        query({"operation": "terminate"})(request)
        assert request.url.params["machine_name"] == "m1"
        assert request.url.params["operation"] == "terminate"
        assert request.url.path == "/services/instances/i-1"


class TestCancelContext:
    """Tests for CancelContext."""

    def test_cancel(self):
        ctx = CancelContext()
        assert not ctx.cancelled
        ctx.cancel()
        assert ctx.cancelled
