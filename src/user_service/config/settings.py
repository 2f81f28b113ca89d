"""Configuration models and helpers for the user service."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class ServiceConfig(BaseModel):
    """Main HTTP server configuration."""

    name: str = Field(default="user-service")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    environment: str = Field(default="development")
    debug: bool = Field(default=False)
    api_prefix: str = Field(default="/api/v1")
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @field_validator("environment", mode="before")
    @classmethod
    def _validate_environment(cls, value: str) -> str:
        valid_envs = {"development", "staging", "production"}
        env_value = (value or "development").lower()
        if env_value not in valid_envs:
            raise ValueError(f"environment must be one of {sorted(valid_envs)}")
        return env_value

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: Any) -> List[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value or []


class ObservabilityConfig(BaseModel):
    """Logging and metrics exporter configuration."""

    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    metrics_enabled: bool = Field(default=True)
    metrics_host: str = Field(default="0.0.0.0")
    metrics_port: int = Field(default=8081)
    metrics_path: str = Field(default="/metrics")
    sample_interval_seconds: float = Field(default=15.0, gt=0)

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = (value or "INFO").upper()
        if level not in valid_levels:
            raise ValueError(f"log_level must be one of {sorted(valid_levels)}")
        return level

    @field_validator("log_format", mode="before")
    @classmethod
    def _validate_log_format(cls, value: str) -> str:
        fmt = (value or "json").lower()
        if fmt not in {"json", "console"}:
            raise ValueError("log_format must be 'json' or 'console'")
        return fmt


class BuildConfig(BaseModel):
    """Build metadata published through the build_info gauge."""

    version: str = Field(default="1.0.0")
    commit_hash: str = Field(default="unknown")


class Settings(BaseSettings):
    """Primary configuration model, loaded from the environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
    )

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    def model_post_init(self, __context: Any) -> None:
        super().model_post_init(__context)
        self._validate_configuration()

    def _validate_configuration(self) -> None:
        if self.service.environment == "production":
            if self.service.debug:
                raise ValueError("debug must be False in production")
            if self.observability.log_level == "DEBUG":
                logger.warning(
                    "DEBUG log level detected in production; consider INFO or higher."
                )
        if self.service.port == self.observability.metrics_port:
            raise ValueError("metrics_port must differ from the service port")

    def get_cors_config(self) -> Dict[str, Any]:
        """Return a CORS middleware configuration derived from settings."""

        return {
            "allow_origins": self.service.cors_origins,
            "allow_methods": ["GET", "POST", "OPTIONS", "PUT", "DELETE"],
            "allow_headers": [
                "Origin",
                "Content-Type",
                "Accept",
                "Authorization",
                "X-API-Key",
            ],
        }


@lru_cache()
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
