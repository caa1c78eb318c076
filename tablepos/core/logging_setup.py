"""One JSON object per log line, tagged with the request and device in flight."""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Optional

from tablepos.core.request_context import get_device_id, get_request_id

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Join codes let anyone at the table into the order; keep them out of logs
_MASKS = (
    (re.compile(r"\b((?:random_)?code\s*[:=]\s*)(\d{4})\b", re.IGNORECASE), r"\1****"),
    (re.compile(r"((?:token|secret)\s*[:=]\s*)([^\s\",}]+)", re.IGNORECASE), r"\1***"),
)

_CONTEXT_FIELDS = ("event", "order_id", "table_id", "method", "endpoint", "status_code", "duration_ms")


def mask_sensitive(text: str) -> str:
    for pattern, replacement in _MASKS:
        text = pattern.sub(replacement, text)
    return text


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "message": mask_sensitive(record.getMessage()),
            "request_id": getattr(record, "request_id", None) or get_request_id(),
            "device_id": getattr(record, "device_id", None) or get_device_id(),
        }
        entry.update(
            {name: getattr(record, name) for name in _CONTEXT_FIELDS if getattr(record, name, None) is not None}
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or LOG_LEVEL).upper()
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level)
    # SQL echo stays opt-in through SQLAlchemy's own settings
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
