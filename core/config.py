"""Application configuration settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Table Booking Core"
    APP_ENV: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    API_V1_PREFIX: str = "/api/v1"

    # Database
    DATABASE_URL: str = "sqlite:///./reservations.db"
    DB_ECHO: bool = False

    # Restaurant defaults
    RESTAURANT_TIMEZONE: str = "Europe/Bratislava"
    SLOT_GRANULARITY_MINUTES: int = 15
    DEFAULT_MIN_ADVANCE_HOURS: float = 2
    MAX_BOOKING_ATTEMPTS: int = 3

    # Fallbacks for restaurants that leave these unset
    DEFAULT_ADVANCE_BOOKING_DAYS: int = 30
    DEFAULT_MIN_PARTY_SIZE: int = 1
    DEFAULT_MAX_PARTY_SIZE: int = 20

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed_levels:
            raise ValueError(f"LOG_LEVEL must be one of {allowed_levels}")
        return v_upper

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(f"APP_ENV must be one of {allowed_envs}")
        return v_lower

    @field_validator("SLOT_GRANULARITY_MINUTES")
    @classmethod
    def validate_granularity(cls, v: int) -> int:
        if v <= 0 or 60 % v != 0:
            raise ValueError("SLOT_GRANULARITY_MINUTES must be a positive divisor of 60")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def use_json_logs(self) -> bool:
        return self.APP_ENV in ("staging", "production")


settings = Settings()
