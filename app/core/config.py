"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Settings are read once when the application is built and stay fixed for
the lifetime of that application instance.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

# Select the .env file for the current environment
_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Load .env file early to populate os.environ before creating nested settings
# This is necessary because Pydantic nested BaseSettings don't inherit env_file
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    name: str = Field(
        "Portfolio CMS API",
        description="Service name shown in the OpenAPI document",
    )
    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class RateLimitSettings(BaseSettings):
    """Fixed-window rate limiting for write endpoints.

    ``RATE_LIMIT_WINDOW_MS`` and ``RATE_LIMIT_MAX`` are the public knobs; the
    field names are spelled out for readability and accepted as init kwargs.
    """

    enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on write endpoints",
    )
    window_ms: int = Field(
        60000,
        description="Rate limit window size in milliseconds",
        ge=1,
    )
    max_requests: int = Field(
        3,
        description="Maximum number of requests allowed per window (per client)",
        ge=1,
        validation_alias="RATE_LIMIT_MAX",
    )
    cleanup_probability: float = Field(
        0.01,
        description="Chance that a single check also sweeps expired records",
        ge=0.0,
        le=1.0,
    )

    model_config = SettingsConfigDict(
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
        populate_by_name=True,
    )


class AuthSettings(BaseSettings):
    """Admin session configuration."""

    secret: str = Field(
        "change-me-in-production",
        description="HMAC secret used to sign session cookies",
    )
    cookie_name: str = Field(
        "portfolio_session",
        description="Name of the session cookie",
    )
    session_max_age_seconds: int = Field(
        24 * 60 * 60,
        description="Session lifetime in seconds",
        ge=60,
    )
    cookie_secure: bool = Field(
        False,
        description="Mark the session cookie as Secure (HTTPS only)",
    )
    admin_email: str | None = Field(
        None,
        description="Bootstrap admin email, created on startup when missing",
    )
    admin_password: str | None = Field(
        None,
        description="Bootstrap admin password",
    )

    model_config = SettingsConfigDict(
        env_prefix="AUTH_",
        case_sensitive=False,
    )


class StorageSettings(BaseSettings):
    """Document store configuration."""

    backend: str = Field(
        "memory",
        description="Storage backend: 'memory' or 'json'",
    )
    path: str = Field(
        "data/portfolio.json",
        description="Data file used by the json backend (relative to project root)",
    )

    model_config = SettingsConfigDict(
        env_prefix="STORAGE_",
        case_sensitive=False,
    )


class CacheSettings(BaseSettings):
    """Response cache configuration for public read endpoints."""

    enabled: bool = Field(
        True,
        description="Serve public GET payloads from the tagged cache",
    )
    ttl_seconds: int = Field(
        300,
        description="Time-to-live of cached payloads",
        ge=1,
    )
    max_entries: int | None = Field(
        512,
        description="Maximum number of cached payloads (None for unlimited)",
    )

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: 'json' or 'plain'")
    output: str = Field("stdout", description="Log output: 'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path for file output")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are invalid.

    Environments:
    - development: Local development (DEBUG=true)
    - testing: Automated tests (uses .env.testing)
    - staging: Pre-production (uses .env.staging)
    - production: Production deployment (uses .env.production)
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
