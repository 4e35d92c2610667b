"""Shared Pydantic models for the back-office services."""

from .common import HealthStatus, ServiceInfo

__all__ = [
    "HealthStatus",
    "ServiceInfo",
]
