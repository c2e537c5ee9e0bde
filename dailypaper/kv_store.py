"""
Key-value store abstraction over Redis, a SQL table and in-memory testing.

Values are JSON-serializable dicts keyed by ``<entity-kind>:<accountId>``.
Writes are last-write-wins; no backend offers transactions across keys.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import redis
from redis import exceptions as redis_exceptions
from sqlalchemy import JSON, Column, MetaData, String, Table, create_engine, delete, select
from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class KvStore(Protocol):
    """Minimal get/set interface the API needs from persistence."""

    def get(self, key: str) -> Optional[dict]:
        ...

    def set(self, key: str, value: dict) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


@dataclass
class InMemoryKvStore:
    """Dict-backed store for tests/dev."""

    items: dict[str, dict] = field(default_factory=dict)

    def get(self, key: str) -> Optional[dict]:
        value = self.items.get(key)
        if value is None:
            return None
        # Hand out copies so callers can't mutate stored state.
        return json.loads(json.dumps(value))

    def set(self, key: str, value: dict) -> None:
        self.items[key] = json.loads(json.dumps(value, default=str))

    def delete(self, key: str) -> None:
        self.items.pop(key, None)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.items.clear()


@dataclass
class RedisKvStore:
    """Redis-backed store keeping each record as a JSON string."""

    url: str
    key_prefix: str = "dailypaper:"

    def __post_init__(self):
        self.client = redis.Redis.from_url(self.url)

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Optional[dict]:
        try:
            raw = self.client.get(self._key(key))
        except redis_exceptions.ConnectionError:
            # Managed Redis drops idle connections; reconnect once and retry.
            logger.warning("Redis connection lost, reconnecting")
            self.client = redis.Redis.from_url(self.url)
            raw = self.client.get(self._key(key))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)

    def set(self, key: str, value: dict) -> None:
        self.client.set(self._key(key), json.dumps(value, default=str))

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))


class SqlKvStore:
    """
    SQLAlchemy-backed store over a two-column ``key``/``value`` table.

    Accepts any SQLAlchemy URL (Postgres in production, SQLite for tests).
    """

    def __init__(self, database_url: str, table_name: str = "kv_store"):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlKvStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.metadata = MetaData()
        self.table = Table(
            table_name,
            self.metadata,
            Column("key", String, primary_key=True),
            Column("value", JSON, nullable=False),
        )
        self.metadata.create_all(self.engine)

    def get(self, key: str) -> Optional[dict]:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(self.table.c.value).where(self.table.c.key == key)
            ).first()
            return row[0] if row else None

    def set(self, key: str, value: dict) -> None:
        with self.engine.begin() as conn:
            if self._update(conn, key, value):
                return
        try:
            with self.engine.begin() as conn:
                conn.execute(self.table.insert().values(key=key, value=value))
        except IntegrityError:
            # Another writer inserted the key after our update missed it.
            logger.debug("Key %s was inserted concurrently, updating instead", key)
            with self.engine.begin() as conn:
                self._update(conn, key, value)

    def _update(self, conn, key: str, value: dict) -> int:
        result = conn.execute(
            self.table.update().where(self.table.c.key == key).values(value=value)
        )
        return result.rowcount

    def delete(self, key: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(self.table).where(self.table.c.key == key))
