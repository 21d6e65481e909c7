"""Site resolvers for fetching post media."""

from foxsource.resolution.sites.direct import DirectResolver, EnrichmentResult
from foxsource.resolution.sites.e621 import E621Resolver
from foxsource.resolution.sites.furaffinity import FurAffinityResolver
from foxsource.resolution.sites.inkbunny import InkbunnyResolver
from foxsource.resolution.sites.mastodon import MastodonResolver
from foxsource.resolution.sites.twitter import TwitterResolver
from foxsource.resolution.sites.weasyl import WeasylResolver

__all__ = [
    "DirectResolver",
    "E621Resolver",
    "EnrichmentResult",
    "FurAffinityResolver",
    "InkbunnyResolver",
    "MastodonResolver",
    "TwitterResolver",
    "WeasylResolver",
]
