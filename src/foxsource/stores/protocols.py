"""Interfaces of the stores used by resolvers and handlers."""

from __future__ import annotations

from typing import Protocol

from foxsource.core.models import LinkedCredential
from foxsource.core.types import GroupConfigKey


class CredentialStore(Protocol):
    """Per-user OAuth credentials for linked accounts."""

    async def get_linked_credential(self, user_id: int) -> LinkedCredential | None: ...

    async def set_linked_credential(self, user_id: int, credential: LinkedCredential) -> None: ...

    async def get_request_token(self, user_id: int) -> LinkedCredential | None: ...

    async def set_request_token(self, user_id: int, credential: LinkedCredential) -> None: ...

    async def delete_request_token(self, user_id: int) -> None: ...


class ChatConfigStore(Protocol):
    """Per-chat boolean configuration flags."""

    async def get_flag(self, chat_id: int, key: GroupConfigKey) -> bool | None: ...

    async def set_flag(self, chat_id: int, key: GroupConfigKey, value: bool) -> None: ...
