"""
Configuration management using Pydantic Settings
"""

from functools import lru_cache
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings


LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application Configuration
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000

    @field_validator('port')
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate network port"""
        if v < 1 or v > 65535:
            raise ValueError('PORT must be between 1 and 65535')
        return v

    # Logging Configuration
    log_level: str = "INFO"
    logs_dir: str = "logs"
    log_to_file: bool = True

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate log level name"""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'LOG_LEVEL must be one of {sorted(LOG_LEVELS)}')
        return level

    # Upstream Credentials (never exposed to the browser)
    openweather_api_key: Optional[str] = None
    google_maps_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openaq_api_key: Optional[str] = None

    @field_validator(
        'openweather_api_key', 'google_maps_api_key', 'openai_api_key', 'openaq_api_key'
    )
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty credentials as not configured"""
        if v is None or not v.strip():
            return None
        return v.strip()

    # Upstream API Configuration
    openaq_measurements_url: str = "https://api.openaq.org/v3/measurements"
    openaq_default_radius: int = 5000  # meters
    openaq_default_days: int = 1
    openaq_limit: int = 1000
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweather_units: str = "metric"
    google_maps_script_url: str = "https://maps.googleapis.com/maps/api/js"
    google_maps_libraries: str = "drawing,geometry"
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-3.5-turbo"
    api_request_timeout: int = 30

    @field_validator('openaq_default_radius')
    @classmethod
    def validate_radius(cls, v: int) -> int:
        """Validate default search radius"""
        if v < 1:
            raise ValueError('OpenAQ radius must be at least 1 meter')
        if v > 25000:
            raise ValueError('OpenAQ radius cannot exceed 25000 meters')
        return v

    @field_validator('openaq_default_days')
    @classmethod
    def validate_days(cls, v: int) -> int:
        """Validate default lookback window"""
        if v < 1:
            raise ValueError('OpenAQ lookback must be at least 1 day')
        if v > 30:
            raise ValueError('OpenAQ lookback cannot exceed 30 days')
        return v

    @field_validator('openaq_limit')
    @classmethod
    def validate_limit(cls, v: int) -> int:
        """Validate page size requested from OpenAQ"""
        if v < 1 or v > 1000:
            raise ValueError('OpenAQ limit must be between 1 and 1000')
        return v

    @field_validator('api_request_timeout')
    @classmethod
    def validate_api_timeout(cls, v: int) -> int:
        """Validate API request timeout"""
        if v < 1:
            raise ValueError('API timeout must be at least 1 second')
        if v > 300:
            raise ValueError('API timeout cannot exceed 300 seconds')
        return v

    # Insight Client Configuration
    proxy_base_url: str = "http://localhost:3000"

    @property
    def configured_credentials(self) -> dict:
        """Which upstream credentials are present (values never included)"""
        return {
            "openweather": self.openweather_api_key is not None,
            "google_maps": self.google_maps_api_key is not None,
            "openai": self.openai_api_key is not None,
            "openaq": self.openaq_api_key is not None,
        }

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
