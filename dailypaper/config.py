"""
Configuration and settings for the Daily Paper API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_prefix: str = Field(default="/make-server", alias="API_PREFIX")

    # Hosted identity provider (GoTrue / Supabase auth)
    auth_url: Optional[str] = Field(default=None, alias="SUPABASE_URL")
    auth_service_role_key: Optional[str] = Field(
        default=None, alias="SUPABASE_SERVICE_ROLE_KEY"
    )

    # External news API; absence switches the aggregator to fallback mode.
    news_api_key: Optional[str] = Field(default=None, alias="NEWS_API_KEY")
    news_api_url: str = Field(
        default="https://newsapi.org/v2/everything", alias="NEWS_API_URL"
    )
    news_request_timeout: float = Field(default=10.0, alias="NEWS_REQUEST_TIMEOUT")

    # Key-value persistence (Redis preferred, then SQL table)
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")
    database_url: Optional[str] = Field(default=None, alias="DATABASE_URL")
    kv_table_name: str = Field(default="kv_store", alias="KV_TABLE_NAME")

    # Development toggles
    use_in_memory_backends: bool = Field(
        default=False, alias="DAILYPAPER_USE_IN_MEMORY_BACKENDS"
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
