from __future__ import annotations

import os

from pydantic import BaseModel, field_validator

ENV_PREFIX = "MERKLEDROP_"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class Settings(BaseModel):
    """Typed application settings built from environment variables."""

    # Database settings
    database_url: str = "redis://localhost:6379/0"

    # API settings
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_workers: int = 1
    api_cors_origins: list[str] = ["*"]

    # Application settings
    app_name: str = "MerkleDrop"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("api_workers")
    @classmethod
    def validate_api_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("api_workers must be at least 1")
        return v


def _env(name: str, default: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{name}", default)


def get_settings() -> Settings:
    """Return typed settings instance sourced from MERKLEDROP_* env vars."""
    return Settings(
        database_url=_env("DATABASE_URL", "redis://localhost:6379/0"),
        api_host=_env("API_HOST", "0.0.0.0"),
        api_port=int(_env("API_PORT", "8000")),
        api_debug=_env("API_DEBUG", "false").lower() == "true",
        api_workers=int(_env("API_WORKERS", "1")),
        api_cors_origins=_env("API_CORS_ORIGINS", "*").split(","),
        app_name=_env("APP_NAME", "MerkleDrop"),
        app_version=_env("APP_VERSION", "1.0.0"),
        log_level=_env("LOG_LEVEL", "INFO"),
    )
