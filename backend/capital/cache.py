"""
Redis-backed cache for per-user collections.

Reads are best-effort: any Redis failure is logged and reported as a miss so
requests fall through to the database. Writes and deletions never raise.
"""

import logging
from typing import Optional

import redis

from capital.config import settings

logger = logging.getLogger(__name__)


def accounts_key(user_id: str) -> str:
    return f"accounts:{user_id}"


def budgets_key(user_id: str) -> str:
    return f"budgets:{user_id}"


def transactions_key(user_id: str) -> str:
    return f"transactions:{user_id}"


class Cache:
    """Thin wrapper around a Redis client with TTL writes and key deletion."""

    def __init__(self, client: Optional[redis.Redis]):
        self.client = client

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def get(self, key: str) -> Optional[str]:
        if self.client is None:
            return None
        try:
            value = self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"Cache get failed for {key}: {e}")
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, ttl: int, value: str) -> None:
        if self.client is None:
            return
        try:
            self.client.setex(key, ttl, value)
        except redis.RedisError as e:
            logger.error(f"Cache set failed for {key}: {e}")

    def delete(self, *keys: str) -> None:
        if self.client is None or not keys:
            return
        try:
            self.client.delete(*keys)
        except redis.RedisError as e:
            logger.error(f"Cache delete failed for {', '.join(keys)}: {e}")


_client: Optional[redis.Redis] = None


def get_redis_client() -> Optional[redis.Redis]:
    """Lazily build the shared Redis client, or None when caching is off."""
    global _client
    if not settings.cache_enabled or not settings.redis_url:
        return None
    if _client is None:
        _client = redis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1,
        )
    return _client
