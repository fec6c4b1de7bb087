"""Application configuration using Pydantic settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"

    # Weather API (Open-Meteo, no key required)
    weather_api_base_url: str = "https://api.open-meteo.com/v1"
    geocoding_api_base_url: str = "https://geocoding-api.open-meteo.com/v1"
    forecast_days: int = 7

    # Reverse geocoding (Nominatim requires a descriptive User-Agent)
    reverse_geocoding_url: str = "https://nominatim.openstreetmap.org/reverse"
    reverse_geocoding_language: str = "en"

    # IP-based location provider
    ip_location_url: str = "http://ip-api.com/json/"
    location_permission_granted: bool = True  # Answer given to permission prompts

    # HTTP
    http_timeout_seconds: float = 10.0
    http_max_retries: int = 3
    user_agent: str = "weatherism/0.1.0 (weather client)"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "WEATHERISM_"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
