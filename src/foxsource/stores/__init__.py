"""Credential and chat configuration stores backed by Redis."""

from .backends import RedisChatConfigStore, RedisCredentialStore
from .client import AsyncRedisClient
from .keys import StoreKeys
from .protocols import ChatConfigStore, CredentialStore

__all__ = [
    "AsyncRedisClient",
    "ChatConfigStore",
    "CredentialStore",
    "RedisChatConfigStore",
    "RedisCredentialStore",
    "StoreKeys",
]
