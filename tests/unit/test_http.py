from __future__ import annotations

import pytest
import requests

from postcode_finder.common import http as http_module
from postcode_finder.common.constants import USER_AGENT
from postcode_finder.common.errors import ExternalServiceError
from postcode_finder.common.http import HostThrottle, HttpClient, HttpRequestError, RetryConfig, RetryableHttpError


class FakeResponse:
    def __init__(self, status_code: int, payload=None, raises_json: bool = False):
        self.status_code = status_code
        self._payload = payload
        self._raises_json = raises_json

    def json(self):
        if self._raises_json:
            raise ValueError("bad json")
        return self._payload


def test_http_get_json_success(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))

    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, {"ok": True}))
    payload = client.get_json("https://example.com")

    assert payload == {"ok": True}


def test_http_retryable_status_raises_retryable_error(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(503, {"x": 1}))

    with pytest.raises(RetryableHttpError) as exc_info:
        client.get_json("https://example.com")
    assert exc_info.value.status_code == 503


def test_http_client_error_carries_status(monkeypatch):
    client = HttpClient()
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(404, {}))

    with pytest.raises(HttpRequestError) as exc_info:
        client.get_json("https://example.com")
    assert exc_info.value.status_code == 404
    assert isinstance(exc_info.value, ExternalServiceError)


def test_http_invalid_json_raises(monkeypatch):
    client = HttpClient(retry=RetryConfig(max_attempts=1))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: FakeResponse(200, raises_json=True))

    with pytest.raises(HttpRequestError):
        client.get_json("https://example.com")


def test_http_connection_failure_is_wrapped(monkeypatch):
    client = HttpClient()

    def refuse(**_kwargs):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(client.session, "request", refuse)

    with pytest.raises(HttpRequestError):
        client.get_json("https://example.com")


def test_http_single_attempt_by_default(monkeypatch):
    calls = []
    client = HttpClient()

    def fail(**_kwargs):
        calls.append(1)
        return FakeResponse(503, {})

    monkeypatch.setattr(client.session, "request", fail)
    with pytest.raises(RetryableHttpError):
        client.get_json("https://example.com")
    assert len(calls) == 1


def test_http_retries_when_configured(monkeypatch):
    responses = [FakeResponse(503, {}), FakeResponse(200, {"ok": True})]
    client = HttpClient(retry=RetryConfig(max_attempts=2, multiplier=0.0, max_wait=0.0))
    monkeypatch.setattr(client.session, "request", lambda **_kwargs: responses.pop(0))

    assert client.get_json("https://example.com") == {"ok": True}
    assert responses == []


def test_host_throttle_spaces_requests_per_host(monkeypatch):
    clock = [100.0]
    sleeps = []
    monkeypatch.setattr(http_module.time, "monotonic", lambda: clock[0])
    monkeypatch.setattr(http_module.time, "sleep", sleeps.append)

    throttle = HostThrottle(rate_per_sec=2.0)
    throttle.wait("api.postcodes.io")
    throttle.wait("api.postcodes.io")
    throttle.wait("other.example")

    assert sleeps == [0.5]


def test_session_sends_user_agent():
    client = HttpClient()
    assert client.session.headers["User-Agent"] == USER_AGENT
    client.close()
