"""
iReporter - Configuration Management
Centralized configuration using pydantic-settings.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    # iReporter API
    api_base_url: str = "http://localhost:5001/api"
    api_timeout_seconds: float = 30.0

    # Geocoding (Nominatim)
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "iReporter/1.0"

    # Location search
    search_debounce_seconds: float = 0.4
    search_min_query_length: int = 3
    search_result_limit: int = 5

    # Media attachments
    max_media_files: int = 4
    max_file_size_bytes: int = 50 * 1024 * 1024

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
