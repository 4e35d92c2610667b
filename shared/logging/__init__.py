"""Structured logging module using structlog."""

from .structured_logger import (
    get_logger,
    configure_logging,
    bind_context,
    unbind_context,
    current_context,
)

__all__ = [
    "get_logger",
    "configure_logging",
    "bind_context",
    "unbind_context",
    "current_context",
]
