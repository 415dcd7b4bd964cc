from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global SDK settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production"] = "local"
    LOG_LEVEL: str = "INFO"

    # Platform
    VLIBE_BASE_URL: str = "https://vlibe.app"
    HTTP_TIMEOUT: float = 10.0

    # Database credentials (per project)
    VLIBE_PROJECT_ID: Optional[str] = None
    VLIBE_DB_TOKEN: Optional[str] = None

    # App credentials (auth + payments). Server-side only.
    VLIBE_BASE_APP_ID: Optional[str] = None
    VLIBE_BASE_APP_SECRET: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("VLIBE_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
