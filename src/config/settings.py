"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_GATEWAY_MODES = {"local", "remote"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "TrustGate Verification Engine"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @field_validator("gateway_mode")
    @classmethod
    def validate_gateway_mode(cls, v: str) -> str:
        lower = v.lower()
        if lower not in _VALID_GATEWAY_MODES:
            raise ValueError(f"gateway_mode must be one of {_VALID_GATEWAY_MODES}, got '{v}'")
        return lower

    @model_validator(mode="after")
    def validate_positive_limits(self) -> "Settings":
        for field_name in (
            "registry_timeout",
            "result_cache_ttl_ms",
            "result_cache_max_size",
            "search_page_size",
            "default_cross_timeout_ms",
            "registry_max_retries",
        ):
            value = getattr(self, field_name)
            if value <= 0:
                raise ValueError(f"{field_name} must be positive, got {value}")
        return self

    @model_validator(mode="after")
    def validate_remote_config(self) -> "Settings":
        if self.gateway_mode == "remote" and not self.registry_base_url:
            raise ValueError("registry_base_url is required when gateway_mode='remote'")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*']; consider restricting in production"
            )
        return self

    # CORS
    allowed_origins: list[str] = ["*"]

    # Trust gateway (registry + record search)
    gateway_mode: str = "local"
    registry_base_url: str = ""
    registry_api_key: str | None = None
    registry_timeout: float = 10.0
    local_store_path: str | None = None

    # Gateway retries
    registry_max_retries: int = 3
    registry_retry_delay: float = 0.5
    retry_backoff_factor: float = 2.0

    # Evidence collection
    search_page_size: int = 10

    # Result cache (milliseconds)
    result_cache_ttl_ms: int = 300_000
    result_cache_max_size: int = 1000

    # Cross verification
    default_cross_timeout_ms: int = 30_000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
