from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

_EXTRA_FIELDS = ("operation", "document_type", "document_id", "outcome", "error_codes")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        return json.dumps(payload, ensure_ascii=True)


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())
    if root.handlers:
        for handler in root.handlers:
            handler.setFormatter(JsonFormatter())
        return
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)


def log_engine_event(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    operation: str,
    document_type: str | None = None,
    document_id: str | None = None,
    outcome: str | None = None,
    error_codes: list[str] | None = None,
) -> None:
    extra: dict[str, Any] = {"operation": operation}
    if document_type is not None:
        extra["document_type"] = document_type
    if document_id is not None:
        extra["document_id"] = document_id
    if outcome is not None:
        extra["outcome"] = outcome
    if error_codes:
        extra["error_codes"] = error_codes
    logger.log(level, message, extra=extra)
