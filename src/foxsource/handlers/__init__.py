"""Chat handlers built on the resolution layer."""

from foxsource.handlers.base import (
    ChatTransport,
    ImageMatcher,
    Localizer,
    ResultSorter,
    continuous_action,
    find_best_photo,
)
from foxsource.handlers.group_source import (
    MAX_SOURCE_DISTANCE,
    GroupSourceHandler,
    filter_matches,
)
from foxsource.handlers.twitter_link import TwitterLinkHandler

__all__ = [
    # Collaborators
    "ChatTransport",
    "ImageMatcher",
    "Localizer",
    "ResultSorter",
    "continuous_action",
    "find_best_photo",
    # Handlers
    "GroupSourceHandler",
    "MAX_SOURCE_DISTANCE",
    "TwitterLinkHandler",
    "filter_matches",
]
