"""URL utilities shared by resolvers and handlers."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .messages import ChatMessage, MessageEntity

# Plain-text links, with or without a scheme
LINK_PATTERN = re.compile(
    r"(?:https?://|www\.)[^\s<>\"']+"
    r"|\b(?:[a-z0-9-]+\.)+[a-z]{2,}/[^\s<>\"']*",
    re.IGNORECASE,
)
TRAILING_PUNCTUATION = ".,;:!?)]}'\""


def get_file_ext(url: str) -> str | None:
    """
    Get the file extension of a URL.

    The query string is stripped and the extension lowercased. Returns None
    when the final path segment has no extension.
    """
    if not url:
        return None

    path = url.split("?", 1)[0].split("#", 1)[0]
    name = path.rsplit("/", 1)[-1]
    if "." not in name:
        return None

    ext = name.rsplit(".", 1)[-1].lower()
    return ext or None


def find_links(text: str | None) -> list[str]:
    """Find all plain-text links in a piece of text, in order."""
    if not text:
        return []

    links = []
    for match in LINK_PATTERN.finditer(text):
        link = match.group().rstrip(TRAILING_PUNCTUATION)
        if link:
            links.append(link)
    return links


def _entity_links(entities: list[MessageEntity]) -> list[str]:
    return [entity.url for entity in entities if entity.type == "text_link" and entity.url]


def extract_links(message: ChatMessage) -> set[str]:
    """
    Extract every link present in a message.

    Covers plain-text URLs in the text and caption as well as hidden links
    attached to formatting entities.
    """
    links: set[str] = set()

    links.update(find_links(message.text))
    links.update(find_links(message.caption))
    links.update(_entity_links(message.entities))
    links.update(_entity_links(message.caption_entities))

    return links


def normalize_link(link: str) -> str:
    """Reduce a link to a form suitable for comparison."""
    link = link.strip().lower()
    link = re.sub(r"^https?://", "", link)
    link = re.sub(r"^(?:www\.|mobile\.)", "", link)
    return link.rstrip("/")


def link_was_seen(links: set[str] | list[str], source: str) -> bool:
    """Check whether a source URL is among already posted links."""
    wanted = normalize_link(source)
    return any(normalize_link(link) == wanted for link in links)
