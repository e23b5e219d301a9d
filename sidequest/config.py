"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Provider credentials (empty = provider unavailable)
    google_maps_api_key: str = ""
    geoapify_api_key: str = ""

    # Provider endpoints
    google_places_url: str = "https://maps.googleapis.com/maps/api/place/nearbysearch/json"
    geoapify_places_url: str = "https://api.geoapify.com/v2/places"
    overpass_url: str = "https://overpass-api.de/api/interpreter"

    # Timeouts (seconds)
    provider_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 8.0

    # Search defaults
    default_search_radius_miles: float = 25.0
    default_result_limit: int = 10

    # Provider variety in fetch_many
    variety_fraction: float = 0.7
    variety_retry_limit: int = 10

    # Pure-location mode
    location_fetch_count: int = 10
    location_max_attempts: int = 10
    location_min_score: float = 2.0

    # Content-block mode
    block_fetch_count: int = 5
    block_max_attempts: int = 8
    block_min_score: float = 2.2

    target_quest_count: int = 3

    # Location-dependent blocks belong to pure-location mode while it is enabled
    location_mode_enabled: bool = True

    # Reproducibility
    rng_seed: int | None = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
