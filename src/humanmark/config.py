"""HumanMark - Centralized typed configuration.

All values can be overridden via environment variables with the HUMANMARK_ prefix,
except fields with explicit validation_alias which also accept their bare env var name.

Usage:
    from humanmark.config import get_settings
    settings = get_settings()
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings

VALID_ENVS = ("development", "staging", "production", "test")


class Settings(BaseSettings):
    """Typed, validated application settings."""

    model_config = {"env_prefix": "HUMANMARK_", "env_file": ".env", "extra": "ignore", "populate_by_name": True}

    # --- Core ---
    env: str = Field("development", description="Runtime environment")
    version: str = Field("1.0.0", description="Application version")
    debug: bool = Field(False, description="Debug mode flag")
    log_level: str = Field("INFO", description="Log level")
    log_json: bool | None = Field(None, description="Emit JSON logs (defaults to on in production)")

    # --- Server ---
    host: str = Field("0.0.0.0", description="API bind host")
    port: int = Field(8080, description="API bind port")
    cors_origins: str = Field("*", description="Comma-separated CORS origins")
    max_upload_size: int = Field(104_857_600, description="Max upload size in bytes (100MB)")
    rate_limit: int = Field(60, description="Requests per minute per client")

    # --- Authentication ---
    api_key_required: bool = Field(False, description="Require X-API-Key on verify endpoints")
    api_key: str = Field("", description="Service API key")

    # --- Result store ---
    redis_url: str = Field(
        "",
        validation_alias=AliasChoices("REDIS_URL", "HUMANMARK_REDIS_URL"),
        description="Redis URL; empty keeps results in memory",
    )
    result_ttl: int = Field(86400, description="Stored result TTL in seconds (24h)")

    # --- External detectors ---
    detector_timeout: int = Field(30, description="Per-detector timeout in seconds")
    hive_api_key: str = Field(
        "",
        validation_alias=AliasChoices("HIVE_API_KEY", "HUMANMARK_HIVE_API_KEY"),
    )
    gptzero_api_key: str = Field(
        "",
        validation_alias=AliasChoices("GPTZERO_API_KEY", "HUMANMARK_GPTZERO_API_KEY"),
    )
    openai_api_key: str = Field(
        "",
        validation_alias=AliasChoices("OPENAI_API_KEY", "HUMANMARK_OPENAI_API_KEY"),
    )

    @field_validator("env")
    @classmethod
    def _check_env(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_ENVS:
            raise ValueError(f"env must be one of {', '.join(VALID_ENVS)}")
        return v

    @field_validator("port")
    @classmethod
    def _check_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("max_upload_size", "rate_limit", "detector_timeout")
    @classmethod
    def _check_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    # --- Derived helpers ---
    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def json_logs(self) -> bool:
        return self.is_production if self.log_json is None else self.log_json

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def external_detectors_enabled(self) -> bool:
        return bool(self.hive_api_key or self.gptzero_api_key or self.openai_api_key)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton of the application settings."""
    return Settings()
