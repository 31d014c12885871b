"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SHARE_TTL_DAYS = 30


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Generation backend
    openai_api_key: SecretStr | None = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.7

    # Geocoding
    google_maps_api_key: str = ""
    nominatim_user_agent: str = "trip-itinerary-planner/0.1"
    geocode_timeout_seconds: float = 8.0
    geocode_cache_max_entries: int | None = None
    geocode_cache_ttl_seconds: float | None = None
    max_place_lookups: int = 20

    # Database
    database_url: str | None = None

    # Cache
    redis_url: str | None = None

    # Share links (days)
    share_ttl_days: int = DEFAULT_SHARE_TTL_DAYS

    # Rate limiting (requests per window)
    rate_limit_window_seconds: int = 60
    generate_per_min: int = 5
    regenerate_day_per_min: int = 8
    regenerate_section_per_min: int = 8
    share_create_per_min: int = 10
    share_get_per_min: int = 60
    share_delete_per_min: int = 20

    @field_validator("share_ttl_days")
    @classmethod
    def positive_share_ttl(cls, v: int) -> int:
        """Fall back to the default when the TTL is not positive."""
        return v if v > 0 else DEFAULT_SHARE_TTL_DAYS

    def rate_limits(self) -> dict[str, int]:
        """Requests per window by bucket name."""
        return {
            "generate": self.generate_per_min,
            "regenerate-day": self.regenerate_day_per_min,
            "regenerate-section": self.regenerate_section_per_min,
            "share-create": self.share_create_per_min,
            "share-get": self.share_get_per_min,
            "share-delete": self.share_delete_per_min,
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
