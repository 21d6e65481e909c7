"""Resolution layer for turning site URLs into normalized post media."""

from foxsource.resolution.base import (
    AbstractResolver,
    AsyncRateLimiter,
    RateLimitConfig,
    ResolutionResult,
    ResolverConfig,
    require_field,
)
from foxsource.resolution.registry import ResolverRegistry

__all__ = [
    # Base
    "AbstractResolver",
    "AsyncRateLimiter",
    "RateLimitConfig",
    "ResolutionResult",
    "ResolverConfig",
    "require_field",
    # Registry
    "ResolverRegistry",
]
