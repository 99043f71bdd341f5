import time
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

import redis.asyncio as aioredis
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import settings
from app.db.models.cache import CacheEntry
from app.db.session import SessionLocal
from app.utils.logging import get_logger

logger = get_logger()

Expiry = Union[timedelta, int]


def _seconds(expire: Optional[Expiry]) -> Optional[int]:
    if expire is None:
        return None
    if isinstance(expire, timedelta):
        return max(int(expire.total_seconds()), 1)
    return expire


class Cache:
    """String key/value store with per-key absolute expiry.

    Backed by redis, the ``cache_entries`` table, or a process-local dict,
    depending on ``cache_type``. Values are opaque strings; serialization is
    the caller's concern.
    """

    def __init__(
        self,
        cache_type: Optional[str] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ):
        self._redis = None
        self._inmemory: dict[str, tuple[str, Optional[float]]] = {}
        self._session_factory = session_factory or SessionLocal
        self.cache_type = (cache_type or settings.CACHE_TYPE).lower()
        self._fallback_warned = False

    async def init_redis(self):
        if self.cache_type == "redis" and settings.REDIS_URL:
            self._redis = aioredis.from_url(settings.REDIS_URL, decode_responses=True)

    def _use_redis(self) -> bool:
        if self.cache_type != "redis":
            return False
        if self._redis is None:
            if not self._fallback_warned:
                logger.warning(
                    "CACHE_TYPE=redis but no redis client is connected; "
                    "falling back to the process-local cache"
                )
                self._fallback_warned = True
            return False
        return True

    async def get_string(self, key: str) -> Optional[str]:
        if self._use_redis():
            value = await self._redis.get(key)
            return value or None
        elif self.cache_type == "database":
            async with self._session_factory() as db:
                entry = (
                    await db.execute(select(CacheEntry).where(CacheEntry.key == key))
                ).scalar_one_or_none()
                if entry is None:
                    return None
                if entry.expires_at and _aware(entry.expires_at) <= _now():
                    await db.delete(entry)  # Expired
                    await db.commit()
                    return None
                return entry.value
        else:  # inmemory
            item = self._inmemory.get(key)
            if item is None:
                return None
            value, expires_at = item
            if expires_at is not None and expires_at <= time.monotonic():
                self._inmemory.pop(key, None)
                return None
            return value

    async def set_string(self, key: str, value: str, expire: Optional[Expiry] = None):
        seconds = _seconds(expire)
        if self._use_redis():
            await self._redis.set(key, value, ex=seconds)
        elif self.cache_type == "database":
            async with self._session_factory() as db:
                expires_at = _now() + timedelta(seconds=seconds) if seconds else None
                await _upsert_entry(db, key, value, expires_at)
                await db.commit()
        else:  # inmemory
            expires_at = time.monotonic() + seconds if seconds else None
            self._inmemory[key] = (value, expires_at)
        logger.debug(f"Cache set: {key} (ttl={seconds}s)")

    async def remove(self, key: str):
        if self._use_redis():
            await self._redis.delete(key)
        elif self.cache_type == "database":
            async with self._session_factory() as db:
                await db.execute(delete(CacheEntry).where(CacheEntry.key == key))
                await db.commit()
        else:  # inmemory
            self._inmemory.pop(key, None)
        logger.debug(f"Cache remove: {key}")

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


async def _upsert_entry(
    db: AsyncSession, key: str, value: str, expires_at: Optional[datetime]
):
    """Insert or replace one entry in a single statement where the dialect allows."""
    dialect = db.get_bind().dialect.name
    if dialect in ("postgresql", "sqlite"):
        insert = pg_insert if dialect == "postgresql" else sqlite_insert
        stmt = insert(CacheEntry).values(key=key, value=value, expires_at=expires_at)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CacheEntry.key],
            set_={"value": stmt.excluded.value, "expires_at": stmt.excluded.expires_at},
        )
        await db.execute(stmt)
        return
    # Other dialects: replace existing
    await db.execute(delete(CacheEntry).where(CacheEntry.key == key))
    db.add(CacheEntry(key=key, value=value, expires_at=expires_at))


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns.
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


cache = Cache()
