"""Collaborator interfaces and helpers shared by the chat handlers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from foxsource.core.messages import PhotoSize
from foxsource.core.models import File

logger = logging.getLogger(__name__)

# Telegram shows a chat action for about five seconds
ACTION_INTERVAL = 5.0
ACTION_MAX_REPEATS = 6


class ChatTransport(Protocol):
    """Delivers messages to, and downloads files from, the chat platform."""

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_to: int | None = None,
        disable_preview: bool = False,
    ) -> None: ...

    async def send_chat_action(self, chat_id: int, action: str) -> None: ...

    async def download_file(self, file_id: str) -> bytes: ...


class Localizer(Protocol):
    """Renders a localized message template."""

    async def get_message(
        self,
        lang: str | None,
        key: str,
        args: dict[str, Any] | None = None,
    ) -> str: ...


class ImageMatcher(Protocol):
    """Finds visually similar images, each with a distance."""

    async def search_ranked(self, data: bytes) -> list[File]: ...


class ResultSorter(Protocol):
    """Reorders matches according to the viewer's preferences."""

    async def sort_results(self, user_id: int, matches: list[File]) -> list[File]: ...


def find_best_photo(sizes: list[PhotoSize]) -> PhotoSize | None:
    """Pick the largest available resolution of a photo."""
    if not sizes:
        return None
    return max(sizes, key=lambda size: (size.width * size.height, size.file_size or 0))


async def _repeat_action(
    transport: ChatTransport,
    chat_id: int,
    action: str,
    interval: float,
    max_repeats: int,
) -> None:
    for _ in range(max_repeats):
        try:
            await transport.send_chat_action(chat_id, action)
        except Exception as e:
            # Only a presence hint, the real work continues without it
            logger.debug("Unable to send chat action to %s: %s", chat_id, e)
        await asyncio.sleep(interval)


def continuous_action(
    transport: ChatTransport,
    chat_id: int,
    action: str = "typing",
    *,
    interval: float = ACTION_INTERVAL,
    max_repeats: int = ACTION_MAX_REPEATS,
) -> asyncio.Task[None]:
    """
    Keep a chat action visible until the returned task is cancelled.

    Callers cancel the task rather than awaiting it once their reply is ready.
    """
    return asyncio.create_task(
        _repeat_action(transport, chat_id, action, interval, max_repeats),
        name=f"chat-action-{chat_id}",
    )
