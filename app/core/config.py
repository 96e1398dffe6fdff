"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file

Variable names follow the deployed proxy: ``HUBEAU_*`` for the upstream API
and ``APW_*`` for the proxy itself (cache, CORS, rate limit).
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


class UpstreamSettings(BaseSettings):
    """Hub'Eau upstream API location and client behaviour."""

    base: str = Field(
        "https://hubeau.eaufrance.fr",
        description="Base URL of the upstream water-quality API",
    )
    path_communes: str = Field(
        "/api/v1/communes",
        description="Path of the commune lookup endpoint",
    )
    path_resultats: str = Field(
        "/api/v1/qualite/eau_potable/resultats",
        description="Path of the analysis results endpoint",
    )
    timeout_seconds: float = Field(
        5.0,
        description="Upstream request timeout in seconds",
        gt=0,
    )

    model_config = SettingsConfigDict(
        env_prefix="HUBEAU_",
        case_sensitive=False,
    )


class ProxySettings(BaseSettings):
    """Proxy behaviour: caching, CORS, paging and rate limiting."""

    cache_enabled: bool = Field(
        True,
        description="Cache normalized upstream responses in process memory",
    )
    cache_ttl_ms: int = Field(
        24 * 60 * 60 * 1000,
        description="Time-to-live of cached responses in milliseconds",
        ge=1,
    )
    size: int = Field(
        25,
        description="Page size requested from the results endpoint",
        ge=1,
    )
    allow_origin: str = Field(
        "*",
        description="Value of Access-Control-Allow-Origin",
    )
    communes_file: str | None = Field(
        None,
        description="Optional JSON file of communes consulted before the upstream",
    )

    rl_enabled: bool = Field(
        True,
        description="Enable fixed-window rate limiting per client address",
    )
    rl_window_ms: int = Field(
        60_000,
        description="Rate limit window size in milliseconds",
        ge=1,
    )
    rl_max: int = Field(
        60,
        description="Maximum number of requests allowed per window (per client)",
        ge=1,
    )
    rl_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APW_",
        case_sensitive=False,
    )

    @property
    def cache_ttl_seconds(self) -> float:
        return self.cache_ttl_ms / 1000

    @property
    def rl_window_seconds(self) -> float:
        return self.rl_window_ms / 1000


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log destination: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        0,
        description="Rotate the log file after this many bytes (0 disables rotation)",
        ge=0,
    )
    backup_count: int = Field(3, description="Number of rotated files to keep", ge=0)
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header carrying the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


def _build_upstream_settings() -> UpstreamSettings:
    return UpstreamSettings()


def _build_proxy_settings() -> ProxySettings:
    return ProxySettings()


def _build_log_settings() -> LogSettings:
    return LogSettings()


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if a setting is malformed.
    """

    app_env: str = APP_ENV
    upstream: UpstreamSettings = Field(default_factory=_build_upstream_settings)
    proxy: ProxySettings = Field(default_factory=_build_proxy_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
# Nested settings are created via default_factory so env loading works.
settings = Settings()
