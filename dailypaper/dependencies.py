"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from dailypaper.auth import (
    AuthGateway,
    InMemoryAuthGateway,
    SupabaseAuthGateway,
    Unauthorized,
)
from dailypaper.config import get_settings
from dailypaper.kv_store import InMemoryKvStore, KvStore, RedisKvStore, SqlKvStore
from dailypaper.news import NewsAggregator
from dailypaper.records import Account

logger = logging.getLogger(__name__)

_kv_store: KvStore | None = None
_auth_gateway: AuthGateway | None = None
_news_aggregator: NewsAggregator | None = None


def get_kv_store() -> KvStore:
    """
    Return a singleton store so records persist across requests.
    """
    global _kv_store
    if _kv_store:
        return _kv_store

    settings = get_settings()
    if settings.use_in_memory_backends:
        _kv_store = InMemoryKvStore()
    elif settings.redis_url:
        _kv_store = RedisKvStore(url=settings.redis_url)
    elif settings.database_url:
        _kv_store = SqlKvStore(settings.database_url, settings.kv_table_name)
    else:
        logger.warning("No REDIS_URL or DATABASE_URL configured, using in-memory store")
        _kv_store = InMemoryKvStore()
    return _kv_store


def get_auth_gateway() -> AuthGateway:
    global _auth_gateway
    if _auth_gateway:
        return _auth_gateway

    settings = get_settings()
    if (
        settings.use_in_memory_backends
        or not settings.auth_url
        or not settings.auth_service_role_key
    ):
        _auth_gateway = InMemoryAuthGateway()
    else:
        _auth_gateway = SupabaseAuthGateway(
            url=settings.auth_url,
            service_role_key=settings.auth_service_role_key,
        )
    return _auth_gateway


def get_news_aggregator() -> NewsAggregator:
    global _news_aggregator
    if _news_aggregator:
        return _news_aggregator
    settings = get_settings()
    _news_aggregator = NewsAggregator(
        settings.news_api_key,
        api_url=settings.news_api_url,
        timeout=settings.news_request_timeout,
    )
    return _news_aggregator


def get_current_account(
    authorization: Optional[str] = Header(default=None),
    auth: AuthGateway = Depends(get_auth_gateway),
) -> Account:
    """Resolve the caller's account from the bearer token or answer 401."""
    try:
        return auth.verify_token(authorization)
    except Unauthorized as exc:
        raise HTTPException(status_code=401, detail=str(exc) or "Unauthorized")


def reset_dependencies() -> None:
    """Drop cached singletons so the next request rebuilds them from settings."""
    global _kv_store, _auth_gateway, _news_aggregator
    _kv_store = None
    _auth_gateway = None
    _news_aggregator = None
