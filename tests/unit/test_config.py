"""
Unit tests for application settings.
"""

import pytest
from pydantic import ValidationError

from backoffice.src.config import Settings, clear_settings_cache, get_settings


class TestSettings:
    """Test settings loading and validation."""

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.api_prefix == "/api/v1"
        assert settings.store_backend == "postgres"
        assert settings.is_production

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("BACKOFFICE_STORE_BACKEND", "MEMORY")
        monkeypatch.setenv("BACKOFFICE_LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.store_backend == "memory"
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("field,value", [
        ("store_backend", "sqlite"),
        ("log_level", "LOUD"),
        ("environment", "qa"),
        ("log_format", "xml"),
    ])
    def test_rejects_unknown_values(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_database_dsn_strips_driver(self):
        settings = Settings(database_url="postgresql+asyncpg://u:p@db/app", _env_file=None)

        assert settings.database_dsn == "postgresql://u:p@db/app"

    def test_cached(self):
        clear_settings_cache()

        assert get_settings() is get_settings()

        clear_settings_cache()
