"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rift_league.models.league import DEFAULT_MAX_TEAMS, DEFAULT_WEEKS_PER_SEASON


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Database path (DuckDB file)
    database_path: str = "data/rift_league.duckdb"

    # Stats provider
    stats_api_key: str = ""
    stats_request_delay_seconds: float = 0.5
    stats_cache_ttl_seconds: float = 3600

    # Background stats updates
    enable_auto_updates: bool = False
    update_interval_seconds: float = 1800

    # Password hashing (PBKDF2-SHA256 rounds)
    password_hash_iterations: int = 600_000

    # League defaults
    default_weeks_per_season: int = DEFAULT_WEEKS_PER_SEASON
    default_max_teams: int = DEFAULT_MAX_TEAMS


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
