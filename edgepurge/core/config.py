"""Application configuration (environment).

Process-level settings loaded with pydantic-settings from the environment
(EDGEPURGE_ prefix) and .env. The purge settings schema (site code, purge
method, credentials, ...) is a separate, store-backed layer handled by
edgepurge.application.services.settings_service.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "edgepurge"
    app_version: str = "0.7.0"
    debug: bool = False
    log_level: str = "INFO"

    # Site served by this process (used when no content repository is injected)
    site_url: str = "http://localhost"
    multisite: bool = False
    site_id: int = 1
    platform_name: str = "CMS"
    platform_version: str = "0"

    # Import path of the request signer factory ("package.module:callable").
    # Empty means no signer: every purge fails fast with a bad auth client error.
    signer_factory: str = ""

    # Persisted purge settings: JSON file path; empty keeps them in memory.
    settings_file: str = ""

    # Outbound Fast Purge API calls. The core imposes no timeout of its own;
    # this is handed to the HTTP transport.
    http_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="EDGEPURGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v!r}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
