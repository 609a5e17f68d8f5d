"""Observability: structured logging and Prometheus metrics."""

from newsdesk.observability.logging import (
    ConsoleFormatter,
    JsonFormatter,
    LogContext,
    configure_logging,
    get_logger,
)
from newsdesk.observability.metrics import (
    MetricsRegistry,
    get_metrics,
    record_cache_error,
    record_cache_hit,
    record_cache_miss,
    record_store_operation,
)

__all__ = [
    "ConsoleFormatter",
    "JsonFormatter",
    "LogContext",
    "MetricsRegistry",
    "configure_logging",
    "get_logger",
    "get_metrics",
    "record_cache_error",
    "record_cache_hit",
    "record_cache_miss",
    "record_store_operation",
]
