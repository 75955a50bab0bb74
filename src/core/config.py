"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefixed with CHESS_DUEL_) or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CHESS_DUEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Clock: both players start with this many seconds (10 minutes, no increment)
    initial_clock_seconds: int = 600

    # Shared store stand-in
    database_url: str = "sqlite:///./chess_duel.db"
    sql_echo: bool = False

    # Logging
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
