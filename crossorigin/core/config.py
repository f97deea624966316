"""
Cross-Origin Gateway - Configuration Module
============================================
Centralized configuration using Pydantic Settings
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated setting, keeping None as "not configured"."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Application Settings
    # =========================================================================
    app_name: str = "Cross-Origin Gateway"
    app_version: str = "1.0.0"
    dev_mode: bool = Field(default=True, description="Human-readable console logs")
    log_level: str = "INFO"

    # =========================================================================
    # CORS Policy
    # =========================================================================
    cors_origins: str = Field(
        default="",
        description="Comma-separated allowed origins, or * for any",
    )
    cors_methods: Optional[str] = Field(
        default=None,
        description="Comma-separated allowed methods (default: HTTP + WebDAV verbs)",
    )
    cors_headers: Optional[str] = Field(
        default=None,
        description="Comma-separated allowed request headers (default: common headers)",
    )
    cors_expose_headers: str = Field(
        default="",
        description="Comma-separated response headers exposed to scripts, or *",
    )
    cors_max_age: Optional[int] = Field(
        default=None,
        ge=0,
        description="Preflight cache duration in seconds",
    )
    cors_credentials: bool = Field(default=False, description="Allow credentialed requests")
    cors_continue_on_failure: bool = Field(
        default=False,
        description="Forward disallowed simple requests instead of returning 403",
    )

    # =========================================================================
    # Validators
    # =========================================================================
    @field_validator("cors_methods", "cors_headers", mode="before")
    @classmethod
    def blank_as_unset(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        return _split_csv(self.cors_origins)

    @property
    def cors_methods_list(self) -> Optional[List[str]]:
        """Parse allowed methods, None when unset."""
        return _split_csv(self.cors_methods)

    @property
    def cors_headers_list(self) -> Optional[List[str]]:
        """Parse allowed headers, None when unset."""
        return _split_csv(self.cors_headers)

    @property
    def cors_expose_headers_list(self) -> List[str]:
        """Parse exposed response headers into a list."""
        return _split_csv(self.cors_expose_headers)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience access
settings = get_settings()
