"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Cinema Seat Booking"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    INVENTORY_LOG_LEVEL: str = "INFO"

    # Remote inventory service
    INVENTORY_BASE_URL: AnyHttpUrl = "http://localhost:8080"
    USE_API_MOCK: bool = False

    # Seat selection
    SELECTION_FLOW: Literal["single", "multi"] = "single"

    # Owned seat persistence
    OWNED_SEATS_BACKEND: Literal["file", "redis", "memory"] = "file"
    OWNED_SEATS_PATH: str = ".seatbooking/owned_seats.json"
    OWNED_SEATS_KEY: str = "cinema_seat_booking_userData"
    REDIS_URL: str = "redis://localhost:6379/0"

    # Ticket presentation
    CINEMA_NAME: str = "Cineplex Theatre"
    MOVIE_TITLE: str = "The Blockbuster Movie"

    # Reference inventory service hall size
    INVENTORY_ROWS: int = Field(default=3, gt=0)
    INVENTORY_COLS: int = Field(default=4, gt=0)

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }

    @property
    def inventory_base_url(self) -> str:
        return str(self.INVENTORY_BASE_URL).rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
