"""Application settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the portfolio scout."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Optional: the public endpoints work unauthenticated at 60 req/hour
    github_token: str | None = None
    github_api_base: str = "https://api.github.com"
    request_timeout: float = 30.0

    tick_interval: float = 1.0
    rate_limit_poll_interval: float = 60.0
    # Used when a rate-limited response carries no x-ratelimit-reset header
    rate_limit_fallback_wait: float = 15 * 60


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
