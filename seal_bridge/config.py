from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SEAL_API_BASE = "https://app.sealsubscriptions.com/shopify/merchant/api"


class Settings(BaseSettings):
    """Service settings loaded from environment variables with validation.

    The Seal credential is optional on purpose: the listener must come up and
    answer health checks without it. Upstream calls check for it when they run.
    """

    model_config = SettingsConfigDict(
        env_file=(str(Path(__file__).resolve().parents[1] / ".env"), ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = Field(default="Superfiliate Seal Bridge", alias="APP_NAME")
    app_env: Literal["development", "staging", "production", "test"] = Field(
        default="production",
        alias="APP_ENV",
    )
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, ge=1, le=65535, alias="PORT")

    seal_merchant_token: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices("SEAL_MERCHANT_TOKEN", "SEAL_TOKEN", "seal_merchant_token"),
    )
    seal_api_base: str = Field(default=DEFAULT_SEAL_API_BASE, alias="SEAL_API_BASE")
    seal_timeout_seconds: float = Field(default=30.0, gt=0, le=300, alias="SEAL_TIMEOUT_SECONDS")
    seal_token_required: bool = Field(default=False, alias="SEAL_TOKEN_REQUIRED")

    bridge_bearer: SecretStr | None = Field(default=None, alias="BRIDGE_BEARER")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        alias="LOG_LEVEL",
    )
    log_json: bool = Field(default=True, alias="LOG_JSON")

    @field_validator("seal_api_base")
    @classmethod
    def validate_seal_api_base(cls, value: str) -> str:
        """Require an http(s) base URL and drop any trailing slash."""
        normalized = value.strip()
        if not normalized.lower().startswith(("https://", "http://")):
            raise ValueError("SEAL_API_BASE must start with http:// or https://")
        return normalized.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("seal_merchant_token", "bridge_bearer", mode="before")
    @classmethod
    def blank_secret_is_unset(cls, value: Any) -> Any:
        """Treat empty or whitespace-only secrets as not configured."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def seal_token_configured(self) -> bool:
        return self.seal_merchant_token is not None

    def seal_token_value(self) -> str | None:
        if self.seal_merchant_token is None:
            return None
        return self.seal_merchant_token.get_secret_value()

    def bridge_bearer_value(self) -> str | None:
        if self.bridge_bearer is None:
            return None
        return self.bridge_bearer.get_secret_value()


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
