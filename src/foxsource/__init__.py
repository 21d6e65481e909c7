"""foxsource - Resolve art site links into direct media and find image sources."""

from foxsource.client import FoxSourceClient, resolve_url
from foxsource.core.models import File, LinkedCredential, PostInfo
from foxsource.core.types import ResolutionStatus, SiteName
from foxsource.handlers import GroupSourceHandler, TwitterLinkHandler
from foxsource.resolution.base import ResolutionResult
from foxsource.resolution.registry import ResolverRegistry

__version__ = "0.1.0"
__all__ = [
    # Client
    "FoxSourceClient",
    "resolve_url",
    # Types
    "ResolutionStatus",
    "SiteName",
    # Models
    "File",
    "LinkedCredential",
    "PostInfo",
    # Results
    "ResolutionResult",
    "ResolverRegistry",
    # Handlers
    "GroupSourceHandler",
    "TwitterLinkHandler",
    # Version
    "__version__",
]
