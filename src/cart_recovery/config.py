"""
Runtime configuration.

Values come from environment variables (or a local `.env` file) through
pydantic-settings. Required values have no default, so a missing one fails
at startup with a ValidationError instead of at the first webhook.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Shopify store, e.g. my-shop.myshopify.com
    SHOPIFY_STORE: str
    SHOPIFY_TOKEN: str
    SHOPIFY_SECRET: str  # Webhook shared secret
    SHOPIFY_API_VERSION: str = "2025-01"

    TWILIO_ACCOUNT_SID: str
    TWILIO_AUTH_TOKEN: str
    TWILIO_PHONE_NUMBER: str  # Sender identity
    TWILIO_API_URL: str = "https://api.twilio.com"

    DATABASE_URL: str  # SQLAlchemy async URL, e.g. sqlite+aiosqlite:///cart_logs.db

    PORT: int = 3000

    TEMPORAL_ADDRESS: str = "localhost:7233"
    TASK_QUEUE: str = "cart-recovery"

    RECOVERY_DELAY_SECONDS: int = 60 * 60
    DISCOUNT_PERCENT: int = 10
    HTTP_TIMEOUT_SECONDS: float = 30.0
    ACTIVITY_TIMEOUT_SECONDS: int = 600


@lru_cache
def get_settings() -> Settings:
    return Settings()
