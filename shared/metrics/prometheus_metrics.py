"""Prometheus metrics definitions and helpers.

Provides metric definitions for the repository layer and the HTTP boundary.
Each container takes the registry it registers into so applications and
tests can use isolated registries.
"""

from typing import Callable

from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    REGISTRY,
    CollectorRegistry,
)


class RepositoryMetrics:
    """Repository operation metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize repository metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.operations = Counter(
            "repository_operations_total",
            "Total number of repository operations",
            ["repository", "operation", "outcome"],
            registry=registry,
        )

        self.duration = Histogram(
            "repository_operation_duration_seconds",
            "Time spent executing repository operations",
            ["repository", "operation"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
            registry=registry,
        )

    def observe(self, repository: str, operation: str, outcome: str, seconds: float) -> None:
        """Record one finished operation."""
        self.operations.labels(repository=repository, operation=operation, outcome=outcome).inc()
        self.duration.labels(repository=repository, operation=operation).observe(seconds)


class HttpMetrics:
    """HTTP boundary metrics."""

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        """Initialize HTTP metrics.

        Args:
            registry: Prometheus registry to use
        """
        self.requests = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status"],
            registry=registry,
        )

        self.duration = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=registry,
        )


def get_metrics_handler(registry: CollectorRegistry = REGISTRY) -> Callable[[], bytes]:
    """Get metrics handler for HTTP endpoint.

    Args:
        registry: Registry to render

    Returns:
        Function that generates Prometheus metrics output
    """

    def metrics_handler() -> bytes:
        return generate_latest(registry)

    return metrics_handler
