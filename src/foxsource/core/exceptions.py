"""Custom exception hierarchy for foxsource."""

from typing import Any


class FoxSourceError(Exception):
    """Base exception for all foxsource errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ResolutionError(FoxSourceError):
    """Failed to resolve a URL."""

    def __init__(
        self,
        message: str,
        source: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.source = source


class ResolverUnavailableError(ResolutionError):
    """External site or API could not be reached or answered with an error."""

    def __init__(
        self,
        message: str,
        source: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, source, details)
        self.status_code = status_code


class SchemaError(ResolutionError):
    """A required field was missing from a site's response."""

    pass


class FatalConfigurationError(ResolutionError):
    """Long-lived credentials are invalid or lack permissions.

    Retrying cannot succeed, so resolvers remember this error and raise it
    again on every later call.
    """

    pass


class SessionExpiredError(ResolutionError):
    """A site reported that a previously issued session is no longer valid."""

    pass


class HashSearchError(FoxSourceError):
    """The perceptual hash-search service failed."""

    pass


class StoreError(FoxSourceError):
    """A credential or configuration store operation failed."""

    pass
