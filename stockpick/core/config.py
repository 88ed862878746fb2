"""
Stockpick Configuration
Core settings for the stock picking allocation service
"""
from decimal import Decimal
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    # Application Info
    APP_NAME: str = "Stockpick Allocation API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./stockpick.db"
    DATABASE_POOL_SIZE: int = 5
    DATABASE_MAX_OVERFLOW: int = 10

    # CORS
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:5173",  # Vite dev server
    ]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Path = Path("logs")
    LOG_FILE: str = "app.log"
    ERROR_LOG_FILE: str = "error.log"
    LOG_TO_FILE: bool = False

    # Picking engine
    # Fallback conversion rates for stock records whose own rate is missing/zero.
    # Left unset until the business default is confirmed; see DESIGN.md.
    PICKING_FALLBACK_LEVEL1_RATE: Optional[Decimal] = None
    PICKING_FALLBACK_LEVEL2_RATE: Optional[Decimal] = None
    PICKING_PLAN_MAX_AGE_MINUTES: int = 30

    # API Configuration
    API_V1_STR: str = "/api/v1"
    DOCS_URL: str = "/docs"
    OPENAPI_URL: str = "/openapi.json"

    @field_validator("PICKING_FALLBACK_LEVEL1_RATE", "PICKING_FALLBACK_LEVEL2_RATE")
    @classmethod
    def validate_fallback_rate(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        """Fallback rates must be positive when configured"""
        if v is not None and v <= 0:
            raise ValueError("fallback conversion rate must be greater than zero")
        return v

    @field_validator("PICKING_PLAN_MAX_AGE_MINUTES")
    @classmethod
    def validate_plan_age(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("PICKING_PLAN_MAX_AGE_MINUTES must be positive")
        return v

    def rate_fallback(self):
        """Build the engine fallback configuration from settings"""
        from stockpick.services.picking.unit_hierarchy import RateFallback

        return RateFallback(
            level1_rate=self.PICKING_FALLBACK_LEVEL1_RATE,
            level2_rate=self.PICKING_FALLBACK_LEVEL2_RATE,
        )


# Global settings instance
settings = Settings()
