"""Abstract base resolver with HTTP client management and rate limiting."""

from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from collections import deque
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, ClassVar

import httpx
from pydantic import BaseModel, Field

from foxsource.core.exceptions import (
    FatalConfigurationError,
    ResolverUnavailableError,
    SchemaError,
)
from foxsource.core.models import PostInfo
from foxsource.core.types import ResolutionStatus, SiteName
from foxsource.core.urls import get_file_ext

USER_AGENT = "foxsource/0.1 (+https://github.com/foxsource/foxsource)"


@dataclass
class RateLimitConfig:
    """Configuration for rate limiting."""

    requests_per_second: float | None = None
    requests_per_minute: float | None = None
    burst_size: int = 1


@dataclass
class RateLimitState:
    """Tracks rate limit state for a resolver."""

    request_times: deque[float] = field(default_factory=deque)


class ResolverConfig(BaseModel):
    """Configuration for a resolver."""

    api_key: str | None = None
    base_url: str | None = None
    timeout: float = 10.0
    rate_limit: RateLimitConfig | None = None
    user_agent: str = USER_AGENT
    enabled: bool = True


class ResolutionResult(BaseModel):
    """Result of resolving a single URL."""

    status: ResolutionStatus
    records: list[PostInfo] = Field(default_factory=list)
    error_message: str | None = None
    source: SiteName | None = None
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return self.status == ResolutionStatus.SUCCESS and len(self.records) > 0


class AsyncRateLimiter:
    """Async rate limiter with a sliding window."""

    def __init__(self, config: RateLimitConfig) -> None:
        self.config = config
        self._state = RateLimitState()
        self._lock = asyncio.Lock()
        self._semaphore: asyncio.Semaphore | None = None

    async def acquire(self) -> None:
        """Acquire a permit to make a request."""
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.config.burst_size)

        async with self._semaphore:
            async with self._lock:
                await self._wait_for_permit()
                self._record_request()

    async def _wait_for_permit(self) -> None:
        """Wait until a request is permitted."""
        now = time.monotonic()

        # Clean up old request times
        self._cleanup_old_requests(now)

        wait_time = 0.0

        # Per-second limit
        if self.config.requests_per_second:
            window_start = now - 1.0
            recent = [t for t in self._state.request_times if t > window_start]
            if len(recent) >= self.config.requests_per_second:
                wait_time = max(wait_time, recent[0] + 1.0 - now)

        # Per-minute limit
        if self.config.requests_per_minute:
            window_start = now - 60.0
            recent = [t for t in self._state.request_times if t > window_start]
            if len(recent) >= self.config.requests_per_minute:
                wait_time = max(wait_time, recent[0] + 60.0 - now)

        if wait_time > 0:
            await asyncio.sleep(wait_time)

    def _record_request(self) -> None:
        """Record a request timestamp."""
        self._state.request_times.append(time.monotonic())

    def _cleanup_old_requests(self, now: float) -> None:
        """Remove request times older than 1 minute."""
        cutoff = now - 60.0
        while self._state.request_times and self._state.request_times[0] < cutoff:
            self._state.request_times.popleft()


def require_field(data: Any, path: tuple[str | int, ...], source: str) -> Any:
    """
    Walk a decoded JSON document, failing loudly on missing fields.

    Raises:
        SchemaError: if any step of the path is absent, null or of the wrong shape
    """
    dotted = ".".join(str(p) for p in path)
    current = data
    for key in path:
        try:
            current = current[key]
        except (KeyError, IndexError, TypeError) as e:
            raise SchemaError(
                message=f"{source} response was missing {dotted}",
                source=source,
            ) from e
        if current is None:
            raise SchemaError(
                message=f"{source} response had no value for {dotted}",
                source=source,
            )
    return current


class AbstractResolver(ABC):
    """
    Abstract base class for all site resolvers.

    Provides:
    - HTTP client management with connection pooling
    - Optional per-site rate limiting
    - Consistent error annotation for failed requests
    - Memory of fatal configuration errors
    """

    # Class-level configuration (to be overridden by subclasses)
    SITE_NAME: ClassVar[SiteName]
    BASE_URL: ClassVar[str] = ""
    DEFAULT_RATE_LIMIT: ClassVar[RateLimitConfig | None] = None

    def __init__(self, config: ResolverConfig | None = None) -> None:
        self.config = config or ResolverConfig()
        self._client: httpx.AsyncClient | None = None

        rate_limit = self.config.rate_limit or self.DEFAULT_RATE_LIMIT
        self._rate_limiter = AsyncRateLimiter(rate_limit) if rate_limit else None
        self._fatal_error: FatalConfigurationError | None = None

    @property
    def name(self) -> SiteName:
        """Human readable name of this site."""
        return self.SITE_NAME

    @property
    def is_enabled(self) -> bool:
        """Whether this resolver is enabled."""
        return self.config.enabled

    @property
    def priority(self) -> int:
        """Order in the registry (lower = asked earlier)."""
        return 100  # Default, override in subclasses

    @asynccontextmanager
    async def _get_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Get or create HTTP client with proper lifecycle."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url or self.BASE_URL,
                timeout=httpx.Timeout(self.config.timeout),
                headers=self._get_default_headers(),
                follow_redirects=True,
            )

        yield self._client

    def _get_default_headers(self) -> dict[str, str]:
        """Get default headers for requests. Override to add auth."""
        return {"User-Agent": self.config.user_agent}

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _make_request(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request with rate limiting.

        Args:
            method: HTTP method
            url: Absolute URL or path relative to the base URL
            operation: Short description used in error messages,
                e.g. "request e621 api"

        Raises:
            ResolverUnavailableError: on any transport error or timeout
        """
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire()

        async with self._get_client() as client:
            try:
                return await client.request(method, url, **kwargs)
            except httpx.HTTPError as e:
                raise ResolverUnavailableError(
                    message=f"unable to {operation}: {e}",
                    source=self.name.value,
                ) from e

    async def _get_json(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        **kwargs: Any,
    ) -> Any:
        """Make a request that must succeed and return a JSON body."""
        response = await self._make_request(method, url, operation=operation, **kwargs)

        if not response.is_success:
            raise ResolverUnavailableError(
                message=f"unable to {operation}: HTTP {response.status_code}",
                source=self.name.value,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SchemaError(
                message=f"unable to decode {operation} response",
                source=self.name.value,
            ) from e

    def _file_type(self, url: str) -> str:
        """Derive the file type of a media URL or fail the fetch."""
        file_type = get_file_ext(url)
        if file_type is None:
            raise SchemaError(
                message=f"unable to determine file type of {url}",
                source=self.name.value,
            )
        return file_type

    def _check_fatal(self) -> None:
        """Re-raise a previously recorded fatal configuration error."""
        if self._fatal_error is not None:
            raise self._fatal_error

    def _fail_fatally(self, message: str) -> FatalConfigurationError:
        """Record a fatal configuration error so later calls short-circuit."""
        self._fatal_error = FatalConfigurationError(message=message, source=self.name.value)
        return self._fatal_error

    # Abstract methods
    @abstractmethod
    async def supports(self, url: str) -> bool:
        """
        Check whether this resolver understands a URL.

        May perform a network probe; must never raise for I/O failures.
        """
        ...

    @abstractmethod
    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        """
        Fetch normalized post information for a supported URL.

        Args:
            user_id: ID of the user requesting the URL
            url: A URL for which supports() returned True

        Returns:
            One record per media item, or None if the post has no media
        """
        ...

    async def __aenter__(self) -> "AbstractResolver":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
