"""
Unit tests for structured logging helpers.
"""

import structlog

from shared.logging import bind_context, configure_logging, current_context, get_logger, unbind_context
from shared.logging.structured_logger import AppContext


class TestLogging:
    """Test logging configuration and context binding."""

    def test_app_context_processor(self):
        processor = AppContext("backoffice", "staging")

        event = processor(None, "info", {"event": "entity_saved", "app": "override"})

        assert event == {"event": "entity_saved", "app": "override", "environment": "staging"}

    def test_bind_and_unbind(self):
        structlog.contextvars.clear_contextvars()

        bind_context(correlation_id="abc")
        assert current_context() == {"correlation_id": "abc"}

        unbind_context("correlation_id")
        assert current_context() == {}

    def test_configure_logging(self):
        structlog.contextvars.clear_contextvars()

        configure_logging(log_level="DEBUG", json_logs=False, service_name="backoffice-test")

        assert current_context() == {"service": "backoffice-test"}
        assert get_logger(__name__) is not None

        structlog.contextvars.clear_contextvars()
