"""Prometheus metrics for newsdesk.

Provides metrics collection and exposure:
- Cache metrics (hits, misses, absorbed errors)
- Store metrics (operation latency)

Usage:
    from newsdesk.observability.metrics import record_cache_hit

    record_cache_hit()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from prometheus_client import REGISTRY, Counter, Histogram
from prometheus_client import generate_latest as _generate_latest

from newsdesk.config import settings

logger = logging.getLogger(__name__)


@dataclass
class MetricsRegistry:
    """Registry for Prometheus metrics."""

    # Cache metrics
    cache_hits_total: Any = None
    cache_misses_total: Any = None
    cache_errors_total: Any = None

    # Store metrics
    store_operation_duration_seconds: Any = None

    # Internal state
    enabled: bool = True
    _initialized: bool = field(default=False, repr=False)
    _registry: Any = field(default=None, repr=False)

    def initialize(self) -> None:
        """Initialize Prometheus metrics."""
        if self._initialized:
            return

        if not self.enabled:
            logger.info("Metrics are disabled")
            self._initialized = True
            return

        self._registry = REGISTRY

        self.cache_hits_total = Counter(
            "newsdesk_cache_hits_total",
            "Article cache hits",
        )

        self.cache_misses_total = Counter(
            "newsdesk_cache_misses_total",
            "Article cache misses",
        )

        self.cache_errors_total = Counter(
            "newsdesk_cache_errors_total",
            "Cache failures absorbed by the repository",
            ["operation"],
        )

        self.store_operation_duration_seconds = Histogram(
            "newsdesk_store_operation_duration_seconds",
            "Store operation latency in seconds",
            ["operation"],
            buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
        )

        self._initialized = True
        logger.info("Prometheus metrics initialized")

    def generate_latest(self) -> bytes:
        """Generate Prometheus metrics in exposition format."""
        if not self.enabled or self._registry is None:
            return b"# Metrics disabled\n"
        return _generate_latest(self._registry)


# Global metrics registry
metrics_registry = MetricsRegistry(enabled=settings.enable_metrics)


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry.

    Initializes metrics on first access.
    """
    if not metrics_registry._initialized:
        metrics_registry.initialize()
    return metrics_registry


def record_cache_hit() -> None:
    """Record cache hit."""
    metrics = get_metrics()
    if metrics.cache_hits_total:
        metrics.cache_hits_total.inc()


def record_cache_miss() -> None:
    """Record cache miss."""
    metrics = get_metrics()
    if metrics.cache_misses_total:
        metrics.cache_misses_total.inc()


def record_cache_error(operation: str) -> None:
    """Record a cache failure that was logged and absorbed.

    Args:
        operation: Cache operation (get, set, delete, decode)
    """
    metrics = get_metrics()
    if metrics.cache_errors_total:
        metrics.cache_errors_total.labels(operation=operation).inc()


def record_store_operation(operation: str, duration: float) -> None:
    """Record store operation duration.

    Args:
        operation: Store operation (insert, update, delete, get, count, scan)
        duration: Operation duration in seconds
    """
    metrics = get_metrics()
    if metrics.store_operation_duration_seconds:
        metrics.store_operation_duration_seconds.labels(operation=operation).observe(duration)
