"""UTC and monotonic clock helpers for log metadata."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def elapsed_ms(started_at: float) -> int:
    """Milliseconds since a ``time.perf_counter()`` reading."""
    return int(round((time.perf_counter() - started_at) * 1000))
