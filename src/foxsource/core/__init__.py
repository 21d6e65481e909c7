"""Core types, models, and utilities."""

from .exceptions import (
    FatalConfigurationError,
    FoxSourceError,
    HashSearchError,
    ResolutionError,
    ResolverUnavailableError,
    SchemaError,
    SessionExpiredError,
    StoreError,
)
from .messages import ChatMessage, ChatUser, MessageEntity, PhotoSize
from .models import File, LinkedCredential, PostInfo
from .types import (
    EnrichmentStatus,
    GroupConfigKey,
    HandlerStatus,
    MatchType,
    ResolutionStatus,
    SiteName,
)
from .urls import extract_links, find_links, get_file_ext, link_was_seen, normalize_link

__all__ = [
    # Types
    "EnrichmentStatus",
    "GroupConfigKey",
    "HandlerStatus",
    "MatchType",
    "ResolutionStatus",
    "SiteName",
    # Models
    "File",
    "LinkedCredential",
    "PostInfo",
    # Messages
    "ChatMessage",
    "ChatUser",
    "MessageEntity",
    "PhotoSize",
    # URLs
    "extract_links",
    "find_links",
    "get_file_ext",
    "link_was_seen",
    "normalize_link",
    # Exceptions
    "FatalConfigurationError",
    "FoxSourceError",
    "HashSearchError",
    "ResolutionError",
    "ResolverUnavailableError",
    "SchemaError",
    "SessionExpiredError",
    "StoreError",
]
