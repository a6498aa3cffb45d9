"""Structured logging helpers."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

FIELDS_ATTRIBUTE = "fields"


class JsonFormatter(logging.Formatter):
    """Formats log records as one JSON object per line.

    Engine events are logged with a short event name as the message and their
    measurements (method, steps, evaluations, timings) under
    ``extra={"fields": {...}}``; those are merged into the top level object.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        fields = getattr(record, FIELDS_ATTRIBUTE, None)
        if isinstance(fields, dict):
            for key, value in fields.items():
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, default=str)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Logs ``event`` with ``fields`` attached for :class:`JsonFormatter`."""
    logger.log(level, event, extra={FIELDS_ATTRIBUTE: fields})


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level.upper())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
