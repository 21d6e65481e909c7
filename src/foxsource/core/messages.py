"""Chat message shapes consumed by the handlers.

These mirror the subset of the Telegram Bot API objects the handlers read.
The transport layer is responsible for building them.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ChatUser:
    """Sender of a message."""

    id: int
    username: str | None = None
    language_code: str | None = None


@dataclass(frozen=True)
class PhotoSize:
    """One available resolution of an uploaded photo."""

    file_id: str
    width: int
    height: int
    file_size: int | None = None


@dataclass(frozen=True)
class MessageEntity:
    """A formatting entity inside text or caption."""

    type: str
    offset: int
    length: int
    url: str | None = None


@dataclass
class ChatMessage:
    """An inbound chat message."""

    message_id: int
    chat_id: int
    from_user: ChatUser | None = None
    text: str | None = None
    caption: str | None = None
    photo: list[PhotoSize] = field(default_factory=list)
    entities: list[MessageEntity] = field(default_factory=list)
    caption_entities: list[MessageEntity] = field(default_factory=list)

    @property
    def language_code(self) -> str | None:
        return self.from_user.language_code if self.from_user else None
