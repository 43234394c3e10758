"""Postcode geocoding through postcodes.io."""

from __future__ import annotations

from typing import Protocol
from urllib.parse import quote

from postcode_finder.common.errors import ExternalServiceError, InvalidInputError, NotFoundError
from postcode_finder.common.http import HttpClient, HttpRequestError, RetryConfig, TimeoutConfig
from postcode_finder.common.models import GeocodeResult
from postcode_finder.common.postcode import format_postcode

DEFAULT_BASE_URL = "https://api.postcodes.io"


class PostcodeResolver(Protocol):
    def resolve(self, text: str) -> GeocodeResult:
        """Return coordinates and administrative area, or raise NotFoundError,
        InvalidInputError or ExternalServiceError."""
        ...


def _safe_float(value: object) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class PostcodesIoResolver:
    def __init__(self, http: HttpClient, base_url: str = DEFAULT_BASE_URL) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")

    def close(self) -> None:
        self.http.close()

    def resolve(self, text: str) -> GeocodeResult:
        postcode = format_postcode(text)
        if postcode is None:
            raise InvalidInputError(f"Not a UK unit postcode: {text!r}")

        url = f"{self.base_url}/postcodes/{quote(postcode)}"
        try:
            payload = self.http.get_json(url)
        except HttpRequestError as exc:
            if exc.status_code == 404:
                raise NotFoundError(f"Postcode not found: {postcode}") from exc
            raise

        result = payload.get("result") if isinstance(payload, dict) else None
        if not isinstance(result, dict):
            raise ExternalServiceError(f"Unexpected geocoder payload for {postcode}")

        lat = _safe_float(result.get("latitude"))
        lon = _safe_float(result.get("longitude"))
        if lat is None or lon is None:
            # Terminated or non-geographic postcodes come back without a location.
            raise NotFoundError(f"Postcode has no coordinates: {postcode}")

        return GeocodeResult(
            latitude=lat,
            longitude=lon,
            administrative_area=result.get("admin_district"),
        )


def build_resolver(geocoder_config: dict) -> PostcodesIoResolver:
    timeouts = geocoder_config["timeout_seconds"]
    http = HttpClient(
        timeout=TimeoutConfig(connect=float(timeouts["connect"]), read=float(timeouts["read"])),
        retry=RetryConfig(max_attempts=int(geocoder_config["max_attempts"])),
        rate_per_sec=float(geocoder_config["rate_per_sec"]),
    )
    return PostcodesIoResolver(http, base_url=geocoder_config["base_url"])
