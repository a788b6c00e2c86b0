"""Application settings loaded from the environment (and ``.env``)."""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global storefront settings."""

    # Application
    ENVIRONMENT: Literal["development", "test", "staging", "production"] = "development"
    LOG_LEVEL: str | None = None
    LOG_DIR: str | None = None

    # Payments
    CURRENCY: str = "eur"
    PAYMENT_GATEWAY: Literal["fake", "stripe"] = "fake"
    STRIPE_SECRET_KEY: str = "sk_test_placeholder"
    PAYMENT_METHOD_TYPES: list[str] = ["card", "ideal", "klarna"]
    MIN_CHARGE_MINOR_UNITS: int = 50

    # Client-side checkout
    STOREFRONT_API_URL: str = "http://localhost:8000"
    PAYMENT_RETURN_URL: str = "http://localhost:5173/payment/callback"
    HTTP_TIMEOUT: float = 10.0

    # Feature flags gating fee inclusion
    ENABLE_TAX_PURCHASE: bool = True
    ENABLE_SHIPPING_BY_PRICE_ZONE: bool = True
    ENABLE_DISCOUNT_COUPONS: bool = True

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("CURRENCY")
    @classmethod
    def lowercase_currency(cls, v: str) -> str:
        return v.lower()


@lru_cache
def get_settings() -> Settings:
    """Return the global settings instance, cached."""
    return Settings()
