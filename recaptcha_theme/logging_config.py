from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from typing import Any

from recaptcha_theme.logging_context import RequestIdFilter

REDACTED = "[REDACTED]"
DEFAULT_REDACT_FIELDS: frozenset[str] = frozenset(
    {
        "password",
        "secret",
        "private_key",
        "authorization",
        "cookie",
        "csrf_token",
        "session",
    }
)

# Attributes every LogRecord carries; anything else came in through `extra`.
_RESERVED_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.makeLogRecord({}).__dict__.keys()
) | {"message", "asctime", "color_message", "request_id"}

CONSOLE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(request_id)s] %(message)s"


def parse_redact_fields(raw_value: str) -> frozenset[str]:
    extra_fields = {part.strip().lower() for part in raw_value.split(",")}
    return DEFAULT_REDACT_FIELDS | frozenset(field for field in extra_fields if field)


class JsonLogFormatter(logging.Formatter):
    def __init__(self, *, redact_fields: frozenset[str] = DEFAULT_REDACT_FIELDS) -> None:
        super().__init__()
        self._redact_fields = frozenset(field.lower() for field in redact_fields)

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": _format_timestamp(record.created),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
            "request_id": getattr(record, "request_id", None),
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_ATTRS:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(self._redact(payload), default=str)

    def _redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                key: REDACTED if str(key).lower() in self._redact_fields else self._redact(item)
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple)):
            return [self._redact(item) for item in value]
        return value


def _format_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%SZ")


def configure_logging(
    *,
    level: str = "INFO",
    log_format: str = "console",
    redact_fields: frozenset[str] = DEFAULT_REDACT_FIELDS,
    include_uvicorn_access: bool = False,
) -> None:
    handler = logging.StreamHandler()
    handler.addFilter(RequestIdFilter())
    if log_format == "json":
        handler.setFormatter(JsonLogFormatter(redact_fields=redact_fields))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    access_logger = logging.getLogger("uvicorn.access")
    access_logger.disabled = not include_uvicorn_access
