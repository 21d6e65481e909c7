"""Async Redis client wrapper."""

from __future__ import annotations

import json
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from foxsource.core.exceptions import StoreError


class AsyncRedisClient:
    """Async Redis client wrapper with JSON serialization."""

    def __init__(self, redis_url: str) -> None:
        self._redis_url = redis_url
        self._pool: aioredis.ConnectionPool | None = None
        self._redis: aioredis.Redis | None = None

    @classmethod
    def from_redis(cls, redis: aioredis.Redis) -> AsyncRedisClient:
        """Wrap an already connected Redis client."""
        client = cls("")
        client._redis = redis
        return client

    async def connect(self) -> None:
        """Connect to Redis."""
        self._pool = aioredis.ConnectionPool.from_url(
            self._redis_url,
            max_connections=20,
            decode_responses=True,
        )
        self._redis = aioredis.Redis(connection_pool=self._pool)

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis:
            await self._redis.aclose()
        if self._pool:
            await self._pool.disconnect()
        self._redis = None
        self._pool = None

    def _ensure_connected(self) -> aioredis.Redis:
        if self._redis is None:
            raise StoreError("Redis client is not connected")
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from the store."""
        redis = self._ensure_connected()
        try:
            value = await redis.get(key)
        except RedisError as e:
            raise StoreError(f"unable to read {key}: {e}") from e
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> None:
        """Set a value, optionally expiring after ttl seconds."""
        redis = self._ensure_connected()
        serialized = json.dumps(value, default=str)
        try:
            await redis.set(key, serialized, ex=ttl)
        except RedisError as e:
            raise StoreError(f"unable to write {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        """Delete a key from the store."""
        redis = self._ensure_connected()
        try:
            result = await redis.delete(key)
        except RedisError as e:
            raise StoreError(f"unable to delete {key}: {e}") from e
        return result > 0

    async def __aenter__(self) -> AsyncRedisClient:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
