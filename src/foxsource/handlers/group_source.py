"""Automatic source replies for images posted in group chats."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from foxsource.core.messages import ChatMessage
from foxsource.core.models import File
from foxsource.core.types import GroupConfigKey, HandlerStatus
from foxsource.core.urls import extract_links, link_was_seen
from foxsource.handlers.base import (
    ChatTransport,
    ImageMatcher,
    Localizer,
    ResultSorter,
    continuous_action,
    find_best_photo,
)

if TYPE_CHECKING:
    from foxsource.stores.protocols import ChatConfigStore

logger = logging.getLogger(__name__)

# Highest distance still considered the same image
MAX_SOURCE_DISTANCE = 3


def filter_matches(matches: list[File], max_distance: int = MAX_SOURCE_DISTANCE) -> list[File]:
    """Keep matches close enough to report, preserving their order."""
    return [m for m in matches if m.distance is not None and m.distance <= max_distance]


class GroupSourceHandler:
    """
    Replies to photos in opted-in group chats with their original source.

    Nothing is sent when no match is close enough, or when the poster already
    linked one of the sources in their message.
    """

    name = "group"

    def __init__(
        self,
        transport: ChatTransport,
        config_store: ChatConfigStore,
        matcher: ImageMatcher,
        localizer: Localizer,
        sorter: ResultSorter | None = None,
        link_extractor: Callable[[ChatMessage], set[str]] = extract_links,
    ) -> None:
        self._transport = transport
        self._config = config_store
        self._matcher = matcher
        self._localizer = localizer
        self._sorter = sorter
        self._extract_links = link_extractor

    async def _find_matches(self, message: ChatMessage) -> list[File]:
        best_photo = find_best_photo(message.photo)
        data = await self._transport.download_file(best_photo.file_id)
        matches = await self._matcher.search_ranked(data)

        if self._sorter is not None and message.from_user is not None:
            matches = await self._sorter.sort_results(message.from_user.id, matches)

        return matches

    async def _compose(self, lang: str | None, matches: list[File]) -> str:
        if len(matches) == 1:
            return await self._localizer.get_message(
                lang,
                "automatic-single",
                {"link": matches[0].source_url()},
            )

        lines = [await self._localizer.get_message(lang, "automatic-multiple")]
        for match in matches:
            lines.append(
                await self._localizer.get_message(
                    lang,
                    "automatic-multiple-result",
                    {"link": match.source_url(), "distance": match.distance},
                )
            )

        return "".join(f"{line}\n" for line in lines)

    async def handle(self, message: ChatMessage) -> HandlerStatus:
        if not message.photo:
            return HandlerStatus.IGNORED

        enabled = await self._config.get_flag(message.chat_id, GroupConfigKey.GROUP_ADD)
        if enabled is not True:
            return HandlerStatus.IGNORED

        action = continuous_action(self._transport, message.chat_id, "typing")
        try:
            matches = filter_matches(await self._find_matches(message))
            if not matches:
                logger.debug("No close matches for message %s", message.message_id)
                return HandlerStatus.COMPLETED

            links = self._extract_links(message)
            if any(link_was_seen(links, match.source_url()) for match in matches):
                logger.debug("Message %s already linked its source", message.message_id)
                return HandlerStatus.COMPLETED

            text = await self._compose(message.language_code, matches)
        finally:
            action.cancel()

        await self._transport.send_message(
            message.chat_id,
            text,
            reply_to=message.message_id,
            disable_preview=True,
        )

        return HandlerStatus.COMPLETED
