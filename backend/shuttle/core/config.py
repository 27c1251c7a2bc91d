"""Application configuration using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackend(str, Enum):
    MEMORY = "memory"
    DATABASE = "database"


class PaymentProviderKind(str, Enum):
    FAKE = "fake"
    STRIPE = "stripe"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = "Shuttle Booking"
    debug: bool = False
    api_v1_prefix: str = "/v1"
    log_level: str = "INFO"

    # Store
    store_backend: StoreBackend = StoreBackend.MEMORY
    database_url: Optional[str] = None

    # CORS
    allowed_origins: str = "http://localhost:5173"

    # Admin routes
    admin_api_key: Optional[str] = None

    # Payments
    payment_provider: PaymentProviderKind = PaymentProviderKind.FAKE
    stripe_secret_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    currency: str = "usd"

    # Development fixtures
    seed_sample_data: bool = False

    @property
    def origins(self) -> list[str]:
        """Allowed CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
