"""Tests for settings and logging configuration."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from neo_permissions.config import LoggingConfig, PermissionSettings, get_log_level_from_verbosity, get_settings
from neo_permissions.features.permissions.entities import Permission, Role


class TestPermissionSettings:
    """Test PermissionSettings defaults and environment overrides."""

    def test_defaults(self):
        settings = PermissionSettings(_env_file=None)

        assert settings.enable_cache is True
        assert settings.cache_key == "neo_permissions.permission.cache"
        assert settings.cache_store == "default"
        assert settings.cache_ttl_seconds == 24 * 60 * 60
        assert settings.enable_wildcard_permission is False
        assert settings.default_guard == "web"
        assert settings.permission_model is Permission
        assert settings.role_model is Role

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("NEO_PERMISSION_ENABLE_WILDCARD_PERMISSION", "true")
        monkeypatch.setenv("NEO_PERMISSION_CACHE_STORE", "redis")
        monkeypatch.setenv("NEO_PERMISSION_CACHE_EXPIRATION_TIME", "PT5M")
        monkeypatch.setenv("NEO_PERMISSION_GUARDS", '{"api": "app.models.ApiClient"}')

        settings = PermissionSettings(_env_file=None)

        assert settings.enable_wildcard_permission is True
        assert settings.get_cache_config() == {
            "enabled": True,
            "key": "neo_permissions.permission.cache",
            "store": "redis",
            "ttl": 300,
        }
        assert settings.guards == {"api": "app.models.ApiClient"}

    def test_negative_expiration_rejected(self):
        with pytest.raises(ValidationError):
            PermissionSettings(_env_file=None, cache_expiration_time=timedelta(seconds=-1))

    def test_unknown_model_rejected(self):
        with pytest.raises(ValidationError):
            PermissionSettings(_env_file=None, permission_model="neo_permissions.missing.Permission")

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()


class TestLoggingConfig:
    """Test the logging dictConfig built from the environment."""

    @pytest.mark.parametrize("verbosity,level", [
        ("quiet", "ERROR"),
        ("NORMAL", "WARNING"),
        ("verbose", "INFO"),
        ("debug", "DEBUG"),
        ("chatty", "WARNING"),
    ])
    def test_verbosity_levels(self, verbosity, level):
        assert get_log_level_from_verbosity(verbosity) == level

    def test_build_from_verbosity(self, monkeypatch):
        monkeypatch.setenv("LOG_VERBOSITY", "verbose")
        monkeypatch.setenv("LOG_FORMAT", "json")

        config = LoggingConfig.build()

        assert config["root"]["level"] == "INFO"
        assert config["formatters"]["default"]["format"].startswith('{"time"')
        assert config["loggers"]["redis"] == {"level": "ERROR", "propagate": True}

    def test_build_from_level(self, monkeypatch):
        monkeypatch.delenv("LOG_VERBOSITY", raising=False)
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FORMAT", "unknown")

        config = LoggingConfig.build()

        assert config["handlers"]["console"]["level"] == "DEBUG"
        assert config["formatters"]["default"]["format"] == "%(asctime)s - %(levelname)s - %(message)s"
