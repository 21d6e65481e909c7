"""Redis-backed credential and chat configuration stores."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from foxsource.core.exceptions import StoreError
from foxsource.core.models import LinkedCredential
from foxsource.core.types import GroupConfigKey
from foxsource.stores.client import AsyncRedisClient
from foxsource.stores.keys import StoreKeys

# Request tokens are only useful while the user is entering their PIN
REQUEST_TOKEN_TTL = 3600


def _to_credential(key: str, value: Any) -> LinkedCredential | None:
    if value is None:
        return None
    try:
        return LinkedCredential.model_validate(value)
    except ValidationError as e:
        raise StoreError(f"invalid credential stored at {key}") from e


class RedisCredentialStore:
    """Stores linked OAuth credentials as JSON documents."""

    def __init__(self, redis: AsyncRedisClient) -> None:
        self._redis = redis

    async def get_linked_credential(self, user_id: int) -> LinkedCredential | None:
        key = StoreKeys.twitter_account(user_id)
        return _to_credential(key, await self._redis.get(key))

    async def set_linked_credential(self, user_id: int, credential: LinkedCredential) -> None:
        await self._redis.set(StoreKeys.twitter_account(user_id), credential.model_dump())

    async def get_request_token(self, user_id: int) -> LinkedCredential | None:
        key = StoreKeys.twitter_request(user_id)
        return _to_credential(key, await self._redis.get(key))

    async def set_request_token(self, user_id: int, credential: LinkedCredential) -> None:
        await self._redis.set(
            StoreKeys.twitter_request(user_id),
            credential.model_dump(),
            ttl=REQUEST_TOKEN_TTL,
        )

    async def delete_request_token(self, user_id: int) -> None:
        await self._redis.delete(StoreKeys.twitter_request(user_id))


class RedisChatConfigStore:
    """Stores per-chat boolean flags."""

    def __init__(self, redis: AsyncRedisClient) -> None:
        self._redis = redis

    async def get_flag(self, chat_id: int, key: GroupConfigKey) -> bool | None:
        store_key = StoreKeys.group_config(chat_id, key)
        value = await self._redis.get(store_key)
        if value is None:
            return None
        if not isinstance(value, bool):
            raise StoreError(f"invalid flag stored at {store_key}: {value!r}")
        return value

    async def set_flag(self, chat_id: int, key: GroupConfigKey, value: bool) -> None:
        await self._redis.set(StoreKeys.group_config(chat_id, key), value)
