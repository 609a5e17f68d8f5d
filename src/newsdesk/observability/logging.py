"""Structured logging for newsdesk.

Two output modes share one set of correlation fields:
- JSON lines (orjson) for log shipping in deployed environments
- A compact single-line console format for local development

The repository logs every absorbed cache failure at WARNING with the cache
key, so in JSON mode a failing Redis shows up as a stream of records with
``logger == "newsdesk.persistence.repositories"``.

Usage:
    from newsdesk.observability.logging import LogContext, configure_logging

    configure_logging(json_format=False, level="DEBUG")

    with LogContext(request_id="abc-123"):
        await repository.get_by_id(article_id)  # records carry request_id
"""

from __future__ import annotations

import contextvars
import logging
import sys
from datetime import datetime, timezone
from typing import Any

import orjson

request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "correlation_id", default=""
)

_CONTEXT_FIELDS = (("request_id", request_id_var), ("correlation_id", correlation_id_var))

# Attributes every LogRecord has; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Chatty third-party loggers pinned to WARNING
_NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "asyncio", "redis")


def _context_fields() -> dict[str, str]:
    return {name: value for name, var in _CONTEXT_FIELDS if (value := var.get())}


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Example:
        {"ts": "2026-01-10T12:34:56.789000+00:00", "level": "WARNING",
         "logger": "newsdesk.persistence.repositories",
         "message": "Cache get failed for news:...: ...",
         "location": "repositories:_read_cache:169", "request_id": "abc-123"}
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
            **_context_fields(),
        }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        )

        return orjson.dumps(payload, default=str).decode()


class ConsoleFormatter(logging.Formatter):
    """Single-line human-readable records.

    Example:
        2026-01-10 12:34:56 WARNING  newsdesk.persistence.repositories: Cache get failed [req=abc-123]
    """

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[34m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.use_colors = use_colors and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<8}"
        if self.use_colors:
            level = f"{self.LEVEL_COLORS.get(record.levelno, '')}{level}{self.RESET}"

        line = f"{self.formatTime(record, self.datefmt)} {level} {record.name}: {record.getMessage()}"

        request_id = request_id_var.get()
        if request_id:
            line += f" [req={request_id[:8]}]"

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

    Args:
        json_format: JSON lines instead of the console format
        level: Root log level name (DEBUG, INFO, WARNING, ...)
        use_colors: ANSI colors in console format, when stderr is a TTY
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_format else ConsoleFormatter(use_colors))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level.upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class LogContext:
    """Bind correlation ids to every record logged inside the block.

    Usage:
        with LogContext(request_id="123"):
            await repository.delete(article_id)
    """

    def __init__(self, request_id: str | None = None, correlation_id: str | None = None) -> None:
        self.request_id = request_id
        self.correlation_id = correlation_id
        self._tokens: list[tuple[contextvars.ContextVar[str], contextvars.Token[str]]] = []

    def __enter__(self) -> LogContext:
        bindings = ((request_id_var, self.request_id), (correlation_id_var, self.correlation_id))
        for var, value in bindings:
            if value is not None:
                self._tokens.append((var, var.set(value)))
        return self

    def __exit__(self, *args: Any) -> None:
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (typically ``__name__``)."""
    return logging.getLogger(name)
