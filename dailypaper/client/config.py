"""
Settings for the client application.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Environment-backed settings for the client."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_url: str = Field(
        default="http://127.0.0.1:8000/make-server", alias="DAILYPAPER_API_URL"
    )

    # Hosted identity provider, public (anon) key only.
    auth_url: Optional[str] = Field(default=None, alias="SUPABASE_URL")
    anon_key: Optional[str] = Field(default=None, alias="SUPABASE_ANON_KEY")
    oauth_redirect: Optional[str] = Field(
        default=None, alias="DAILYPAPER_OAUTH_REDIRECT"
    )

    session_file: Optional[Path] = Field(
        default=Path.home() / ".dailypaper" / "session.json",
        alias="DAILYPAPER_SESSION_FILE",
    )

    news_refresh_seconds: float = Field(default=60.0, alias="DAILYPAPER_NEWS_REFRESH")
    redirect_delay_seconds: float = Field(default=2.0, alias="DAILYPAPER_REDIRECT_DELAY")
    request_timeout: float = Field(default=15.0, alias="DAILYPAPER_REQUEST_TIMEOUT")


@lru_cache(maxsize=1)
def get_client_settings() -> ClientSettings:
    return ClientSettings()
