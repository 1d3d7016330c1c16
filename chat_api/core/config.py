"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from chat_api.core.prompts import DEFAULT_SYSTEM_PROMPT


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


def _build_llm_settings() -> "LLMSettings":
    return LLMSettings()  # type: ignore[call-arg]


def _build_app_settings() -> "AppSettings":
    return AppSettings()  # type: ignore[call-arg]


def _build_log_settings() -> "LogSettings":
    return LogSettings()  # type: ignore[call-arg]


class LLMSettings(BaseSettings):
    """Generative model provider configuration.

    Validation of provider-specific requirements (API key presence, known
    provider name) happens in the client factory, not at startup, so the
    service can boot and answer health checks without credentials.
    """

    provider: str = Field(
        "gemini",
        description="LLM provider name (gemini or openai)",
    )
    model: str = Field(
        "gemini-1.5-flash",
        description="Model name (e.g., gemini-1.5-flash, gpt-4o-mini)",
    )
    api_key: str | None = Field(
        None,
        description="API key for the hosted provider",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint (OpenAI-compatible providers only)",
    )
    timeout_seconds: float = Field(
        45.0,
        description="Request timeout in seconds",
    )
    temperature: float | None = Field(
        None,
        description="Sampling temperature; provider default when unset",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-client rate limiting on the chat endpoint",
    )
    rate_limit_max: int = Field(
        30,
        description="Maximum number of admitted requests per window (per client)",
        ge=1,
    )
    rate_limit_window_ms: int = Field(
        60000,
        description="Rate limit window size in milliseconds",
        ge=1,
    )
    rate_limit_max_keys: int | None = Field(
        10000,
        description="Maximum number of tracked clients before LRU eviction (None for unbounded)",
        ge=1,
    )
    rate_limit_sweep_interval_ms: int = Field(
        60000,
        description="Minimum interval between sweeps of expired rate limit windows",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers in responses",
    )
    client_address_header: str = Field(
        "x-forwarded-for",
        description="Header carrying the client address (first comma-separated entry is used)",
    )

    max_messages: int = Field(
        50,
        description="Maximum number of messages accepted per chat request",
        ge=1,
    )
    max_content_chars: int = Field(
        8000,
        description="Maximum message text length in characters",
        ge=1,
    )
    max_image_base64_chars: int = Field(
        8_000_000,
        description="Maximum base64 image length (about 6MB decoded)",
        ge=1,
    )
    system_prompt: str = Field(
        DEFAULT_SYSTEM_PROMPT,
        description="System instruction sent ahead of every user message",
    )
    cors_origins: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Log format: json or plain")
    output: str = Field("stdout", description="Log output: stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int | None = Field(
        10_485_760,
        description="Rotate the log file at this size (None disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated log files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and propagate the request id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    llm: LLMSettings = Field(default_factory=_build_llm_settings)
    app: AppSettings = Field(default_factory=_build_app_settings)
    log: LogSettings = Field(default_factory=_build_log_settings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
