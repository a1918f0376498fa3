import json
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.config import settings

logger = logging.getLogger(__name__)


def list_key(limit: int, offset: int) -> str:
    return f"posts:list:{limit}:{offset}"


def detail_key(post_id: int) -> str:
    return f"posts:detail:{post_id}"


class CacheManager:
    """
    Cache-aside store for post reads, backed by Redis.

    Every method tolerates Redis being unavailable: reads report a miss and
    writes are skipped, so a cache outage only costs extra queries.
    """

    def __init__(self) -> None:
        self._redis: redis.Redis | None = None
        self._hits: int = 0
        self._misses: int = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        """Open the connection pool.  Called once at application startup."""
        self._redis = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=2,
            socket_timeout=2,
        )
        try:
            await self._redis.ping()
            logger.info("Redis connected: %s", settings.REDIS_URL)
        except RedisError as exc:
            logger.warning("Redis ping failed, serving reads from the database: %s", exc)

    async def disconnect(self) -> None:
        if self._redis:
            await self._redis.aclose()
            self._redis = None

    # ------------------------------------------------------------------
    # Core cache operations
    # ------------------------------------------------------------------

    async def get(self, key: str) -> dict | list | None:
        """Return the cached value for *key*, or None on a miss or error."""
        if not self._redis:
            self._misses += 1
            return None
        try:
            data = await self._redis.get(key)
            value = json.loads(data) if data is not None else None
        except (RedisError, ValueError) as exc:
            # Unreachable Redis and undecodable entries both count as a miss.
            logger.debug("Cache GET error for key=%r: %s", key, exc)
            self._misses += 1
            return None
        if value is None:
            self._misses += 1
            return None
        self._hits += 1
        return value

    async def set(self, key: str, value: dict | list, ttl: int | None = None) -> None:
        if not self._redis:
            return
        try:
            await self._redis.set(key, json.dumps(value), ex=ttl)
        except RedisError as exc:
            logger.debug("Cache SET error for key=%r: %s", key, exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Delete all keys matching *pattern* using SCAN (avoids blocking KEYS)."""
        if not self._redis:
            return
        try:
            keys: list[str] = [key async for key in self._redis.scan_iter(match=pattern)]
            if keys:
                await self._redis.delete(*keys)
                logger.debug("Cache invalidated %d key(s) matching %r", len(keys), pattern)
        except RedisError as exc:
            logger.debug("Cache DELETE_PATTERN error for pattern=%r: %s", pattern, exc)

    # ------------------------------------------------------------------
    # Domain-level invalidation
    # ------------------------------------------------------------------

    async def invalidate_posts(self, post_id: int | None = None) -> None:
        """
        Drop every cached page, plus the detail entry of *post_id* when given.

        Any new post or comment can shift the content of every page.
        """
        await self.delete_pattern("posts:list:*")
        if post_id is not None:
            await self.delete_pattern(detail_key(post_id))

    # ------------------------------------------------------------------
    # Observability
    # ------------------------------------------------------------------

    @property
    def stats(self) -> dict:
        total = self._hits + self._misses
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(self._hits / total * 100, 1) if total > 0 else 0.0,
        }


# Module-level singleton shared across all request handlers.
cache = CacheManager()
