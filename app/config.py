from functools import lru_cache
from typing import Annotated, Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

PAYWAY_SANDBOX_PURCHASE_URL = (
    "https://checkout-sandbox.payway.com.kh/api/payment-gateway/v1/payments/purchase"
)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore"
    )

    HTTP_PORT: int = 4000
    LOG_LEVEL: str = "INFO"

    PAYWAY_MERCHANT_ID: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PAYWAY_MERCHANT_ID", "MERCHANT_ID"),
    )
    PAYWAY_API_KEY: str | None = Field(
        default=None,
        validation_alias=AliasChoices("PAYWAY_API_KEY", "API_KEY"),
    )
    PAYWAY_API_URL: str = PAYWAY_SANDBOX_PURCHASE_URL
    PAYWAY_HASH_ENCODING: Literal["base64", "hex"] = "base64"
    PAYWAY_CURRENCY: str = "USD"
    GATEWAY_TIMEOUT: float = 15.0

    FRONTEND_URL: str = "http://localhost:3001"
    BACKEND_URL: str = "http://localhost:4000"
    CORS_ORIGINS: Annotated[list[str], NoDecode] = ["*"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def _split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("FRONTEND_URL", "BACKEND_URL")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def secret_key(self) -> bytes:
        return (self.PAYWAY_API_KEY or "").encode("utf-8")


@lru_cache
def get_settings() -> Settings:
    """Get cached Settings instance."""
    return Settings()
