"""Core enums and type definitions."""

from enum import StrEnum


class SiteName(StrEnum):
    """Human-readable names of the supported sites."""

    DIRECT = "direct link"
    E621 = "e621"
    TWITTER = "Twitter"
    FURAFFINITY = "FurAffinity"
    MASTODON = "Mastodon"
    WEASYL = "Weasyl"
    INKBUNNY = "Inkbunny"


class ResolutionStatus(StrEnum):
    """Status of a resolution attempt."""

    SUCCESS = "success"
    NO_CONTENT = "no_content"  # Recognized URL without any media
    UNSUPPORTED = "unsupported"
    ERROR = "error"


class MatchType(StrEnum):
    """Hash-search match modes accepted by FuzzySearch."""

    CLOSE = "close"
    EXACT = "exact"
    FORCE = "force"


class EnrichmentStatus(StrEnum):
    """Outcome of a best-effort reverse image lookup."""

    MATCHED = "matched"
    NO_MATCH = "no_match"
    TIMEOUT = "timeout"
    ERROR = "error"


class GroupConfigKey(StrEnum):
    """Per-chat configuration flags."""

    GROUP_ADD = "group_add"


class HandlerStatus(StrEnum):
    """Whether a handler acted on a message."""

    IGNORED = "ignored"
    COMPLETED = "completed"
