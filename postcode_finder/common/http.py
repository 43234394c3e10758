"""JSON-over-HTTP client for the geocoder: timeouts, opt-in retries, per-host pacing."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import requests
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from postcode_finder.common.constants import USER_AGENT
from postcode_finder.common.errors import ExternalServiceError

TRANSIENT_STATUS_CODES = frozenset({408, 425, 429, 500, 502, 503, 504})


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 5.0
    read: float = 10.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.connect, self.read)


@dataclass(frozen=True)
class RetryConfig:
    # One attempt: callers decide whether a failed lookup is worth repeating.
    max_attempts: int = 1
    multiplier: float = 1.0
    max_wait: float = 10.0


class HttpRequestError(ExternalServiceError):
    error_code = "HTTP_ERROR"

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableHttpError(HttpRequestError):
    """Timeouts and transient statuses; only these are ever retried."""


def check_status(response: requests.Response, url: str) -> None:
    status = response.status_code
    if status in TRANSIENT_STATUS_CODES:
        raise RetryableHttpError(f"Transient HTTP {status} from {url}", status_code=status)
    if status >= 400:
        raise HttpRequestError(f"HTTP {status} from {url}", status_code=status)


class HostThrottle:
    """Spaces requests to the same host at least ``1 / rate_per_sec`` apart."""

    def __init__(self, rate_per_sec: float) -> None:
        self.interval = 1.0 / rate_per_sec if rate_per_sec > 0 else 0.0
        self._next_slot: dict[str, float] = {}
        self._lock = threading.Lock()

    def wait(self, host: str) -> None:
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot.get(host, now))
            self._next_slot[host] = slot + self.interval
        delay = slot - now
        if delay > 0:
            time.sleep(delay)


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
        rate_per_sec: float = 10.0,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        self.throttle = HostThrottle(rate_per_sec)

    def close(self) -> None:
        self.session.close()

    def _get_once(self, url: str, params: dict[str, Any] | None) -> Any:
        self.throttle.wait(urlparse(url).netloc)
        try:
            response = self.session.request(
                method="GET",
                url=url,
                params=params,
                timeout=self.timeout.as_tuple(),
            )
        except requests.Timeout as exc:
            raise RetryableHttpError(f"Timed out calling {url}") from exc
        except requests.RequestException as exc:
            raise HttpRequestError(f"Request to {url} failed: {exc}") from exc

        check_status(response, url)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpRequestError(f"Invalid JSON payload from {url}") from exc

    def get_json(self, url: str, *, params: dict[str, Any] | None = None) -> Any:
        retrying = Retrying(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(initial=self.retry.multiplier, max=self.retry.max_wait, jitter=0.5),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )
        return retrying(self._get_once, url, params)
