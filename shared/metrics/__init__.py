"""Metrics module using Prometheus."""

from .prometheus_metrics import (
    RepositoryMetrics,
    HttpMetrics,
    get_metrics_handler,
)

__all__ = [
    "RepositoryMetrics",
    "HttpMetrics",
    "get_metrics_handler",
]
