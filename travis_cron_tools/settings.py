"""Application settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the Travis API client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    travis_token: str | None = None
    travis_api_host: str = "api.travis-ci.org"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
