"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from postcode_finder.common.constants import JSON_LOG_FIELDS
from postcode_finder.common.fs import ensure_dir
from postcode_finder.common.time_utils import utc_timestamp_iso

ROOT_LOGGER_NAME = "postcode_finder"


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "request_id": getattr(record, "request_id", None),
            "operation": getattr(record, "operation", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "identifier": getattr(record, "identifier", None),
            "duration_ms": getattr(record, "duration_ms", None),
            "rows_in": getattr(record, "rows_in", None),
            "rows_out": getattr(record, "rows_out", None),
            "error_code": getattr(record, "error_code", None),
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False)


class _RequestIdFilter(logging.Filter):
    def __init__(self, request_id: str) -> None:
        super().__init__()
        self.request_id = request_id

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = self.request_id
        return True


def generate_request_id() -> str:
    """Sortable per-request id, used as the log correlation key."""
    return datetime.now(tz=timezone.utc).strftime("req-%Y%m%dT%H%M%S%fZ")


def build_logger(request_id: str, log_dir: Path | None = None, level: str = "INFO") -> logging.Logger:
    """Configure the package logger; module loggers propagate to it."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.handlers.clear()

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    stream.addFilter(_RequestIdFilter(request_id))
    logger.addHandler(stream)

    if log_dir is not None:
        log_path = log_dir / f"{request_id}.log.jsonl"
        ensure_dir(log_path.parent)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        file_handler.addFilter(_RequestIdFilter(request_id))
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, **event_fields: Any) -> None:
    logger.info(message, extra=event_fields)
