"""Logging helpers that emit JSON per-request records."""
from __future__ import annotations

import json
import logging
import sys
from typing import Any

from starlette.requests import Request

CONTEXT_ATTRS = (
    "request_id",
    "path",
    "method",
    "status_code",
    "duration_ms",
    "report_id",
    "item_count",
    "exception_codes",
    "error_code",
    "fingerprint",
)


class JsonRequestFormatter(logging.Formatter):
    """Formatter that renders structured JSON log records."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        for attr in CONTEXT_ATTRS:
            value = getattr(record, attr, None)
            if value is not None:
                payload[attr] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging handler once for the process."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonRequestFormatter())
    logging.basicConfig(handlers=[handler], level=level.upper(), force=True)


def bind_request_context(request: Request) -> dict[str, Any]:
    """Return context dict used to enrich log records inside request scope."""
    return {
        "request_id": getattr(request.state, "request_id", None),
        "path": request.url.path,
        "method": request.method,
    }
