"""
Configuration settings for the MovR ride service.

This module handles application configuration using Pydantic settings.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = "MovR Ride Service"
    api_version: str = "v1"
    api_prefix: str = "/api"
    debug: bool = False
    log_level: str = "INFO"

    # Database Configuration
    database_url: str = "postgresql+asyncpg://root@localhost:26257/movr"
    db_echo: bool = False
    db_pool_size: int = 20
    db_max_overflow: int = 10
    db_ssl_cert: Optional[str] = None  # CA certificate for TLS connections

    # Vehicle listing
    default_max_vehicles: int = 20

    # Feature toggles (lab stages)
    location_history_enabled: bool = True
    user_rides_enabled: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = False

    @model_validator(mode="after")
    def check_feature_toggles(self) -> "Settings":
        # Ride start/end read the vehicle's location history
        if self.user_rides_enabled and not self.location_history_enabled:
            raise ValueError("user_rides_enabled requires location_history_enabled")
        return self


settings = Settings()
