"""
Permission configuration for the neo-permissions engine.

Settings are constructed once at process start and handed to the registrar,
the guard resolver and the services explicitly.
"""
from datetime import timedelta
from functools import lru_cache
from typing import Any, Dict

from pydantic import Field, ImportString, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PermissionSettings(BaseSettings):
    """Settings recognised by the permission cache, resolver and guard lookup."""

    model_config = SettingsConfigDict(
        env_prefix="NEO_PERMISSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Cache Configuration
    enable_cache: bool = Field(default=True, description="Keep a snapshot of all permissions")
    cache_key: str = Field(default="neo_permissions.permission.cache", min_length=1)
    cache_store: str = Field(default="default", description="Cache backend selector")
    cache_expiration_time: timedelta = Field(default=timedelta(hours=24))

    # Resolution
    enable_wildcard_permission: bool = Field(default=False)
    default_guard: str = Field(default="web", min_length=1)

    # Guard name -> dotted path of the principal model class, in declaration order
    guards: Dict[str, str] = Field(default_factory=dict)

    # Entity classes used when rebuilding a cached snapshot
    permission_model: ImportString = Field(
        default="neo_permissions.features.permissions.entities.permission.Permission",
        validate_default=True,
    )
    role_model: ImportString = Field(
        default="neo_permissions.features.permissions.entities.role.Role",
        validate_default=True,
    )

    @field_validator("cache_expiration_time")
    @classmethod
    def validate_expiration(cls, value: timedelta) -> timedelta:
        """Reject negative expirations; zero means no expiry."""
        if value.total_seconds() < 0:
            raise ValueError("cache_expiration_time must not be negative")
        return value

    @property
    def cache_ttl_seconds(self) -> int:
        """Expiration time in whole seconds, the unit cache backends expect."""
        return int(self.cache_expiration_time.total_seconds())

    def get_cache_config(self) -> Dict[str, Any]:
        """Get cache configuration as a plain dictionary."""
        return {
            "enabled": self.enable_cache,
            "key": self.cache_key,
            "store": self.cache_store,
            "ttl": self.cache_ttl_seconds,
        }


@lru_cache()
def get_settings() -> PermissionSettings:
    """Get the process-wide settings instance."""
    return PermissionSettings()
