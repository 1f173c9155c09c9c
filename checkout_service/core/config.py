"""Checkout Service Configuration"""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file="config/.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Checkout Service"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    # Commerce backend
    commerce_base_url: str = "http://localhost:8001"
    commerce_public_key: Optional[str] = None
    request_timeout: float = 30.0

    # Checkout defaults
    default_delivery_country: str = "CA"
    default_delivery_region: str = "BC"
    test_gateway_id: str = "test_gateway"
    order_notes_field_id: str = "extr_j0YnEoqOPle7P6"

    # Navigation
    exit_path: str = "/"
    confirmation_path: str = "/checkout/confirm"

    # Idle checkouts are dropped after this; finished ones after the shorter grace
    checkout_max_age_hours: int = 24
    finished_checkout_grace_minutes: int = 30


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
