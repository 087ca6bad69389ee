"""
Client configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Event Booking Client"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Remote booking service
    BOOKING_API_URL: str = "http://localhost:3001"
    REQUEST_TIMEOUT: float = 10.0  # seconds

    # Identity of the user whose bookings are tracked
    CURRENT_USER_ID: int = 1

    # Which failures land in the shared error slot: refresh_only, shared
    ERROR_REPORTING: str = "refresh_only"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
