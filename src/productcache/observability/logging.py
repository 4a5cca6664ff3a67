"""Logging setup for the product service.

Two output formats share one set of context fields:
- ``JsonFormatter`` writes one JSON object per line for log shipping
- ``ConsoleFormatter`` writes a single readable line for local runs

The request and correlation ids live in context variables. The HTTP
middleware binds them per request through ``LogContext``; both formatters and
the error envelopes read them back.

    configure_logging(json_format=True, level="INFO")
"""

from __future__ import annotations

import contextvars
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

# Attributes of a bare LogRecord; anything beyond these arrived via `extra`
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def _context_fields() -> dict[str, str]:
    fields = {}
    if request_id := request_id_var.get():
        fields["request_id"] = request_id
    if correlation_id := correlation_id_var.get():
        fields["correlation_id"] = correlation_id
    return fields


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    A cache fault logged by the guard renders as:

        {"timestamp": "...", "level": "WARNING", "logger": "productcache.cache.guard",
         "message": "Cache get failed (key=product_5): timeout", "request_id": "...",
         "cache_operation": "get", "cache_key": "product_5", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            **_context_fields(),
        }

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "traceback": self.formatException(record.exc_info),
            }

        for key, value in _extra_fields(record).items():
            try:
                json.dumps(value)
            except (TypeError, ValueError):
                value = str(value)
            payload[key] = value

        return json.dumps(payload, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Single-line formatter: ``time | LEVEL | logger | message | req=...``."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(level, '')}{level}{self.RESET}"

        line = (
            f"{datetime.now():%Y-%m-%d %H:%M:%S} | {level:8} | "
            f"{record.name} | {record.getMessage()}"
        )
        if request_id := request_id_var.get():
            line += f" | req={request_id[:8]}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    json_format: bool = True,
    level: str = "INFO",
    use_colors: bool = True,
) -> None:
    """Install a single stderr handler on the root logger.

    Calling it again replaces the previous handler rather than adding one.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(use_colors))
    root.addHandler(handler)

    # Per-request access lines and SQL echo are too chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class LogContext:
    """Bind request and correlation ids for the duration of a block.

    Ids left as None keep their current value. Previous values are restored
    on exit, so contexts nest.
    """

    def __init__(self, request_id: str | None = None, correlation_id: str | None = None):
        self.request_id = request_id
        self.correlation_id = correlation_id
        self._tokens: list[tuple[contextvars.ContextVar[str], contextvars.Token[str]]] = []

    def __enter__(self) -> LogContext:
        for var, value in (
            (request_id_var, self.request_id),
            (correlation_id_var, self.correlation_id),
        ):
            if value is not None:
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *exc_info: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)
