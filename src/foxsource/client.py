"""Main library client for standalone usage."""

from __future__ import annotations

import logging
import time

from foxsource.config import FoxSourceSettings
from foxsource.core.exceptions import FoxSourceError
from foxsource.core.types import ResolutionStatus
from foxsource.fuzzysearch import FuzzySearchClient
from foxsource.resolution.base import ResolutionResult
from foxsource.resolution.registry import ResolverRegistry
from foxsource.stores.backends import RedisChatConfigStore, RedisCredentialStore
from foxsource.stores.client import AsyncRedisClient

logger = logging.getLogger(__name__)


class FoxSourceClient:
    """
    Main client for the foxsource library.

    Resolves links to art posts into direct media records without requiring
    a running bot.

    Usage:
        async with FoxSourceClient() as client:
            result = await client.resolve(user_id, "https://e621.net/posts/12345")
            for record in result.records:
                print(record.url)

    Settings are loaded from environment variables or can be passed explicitly.
    """

    def __init__(
        self,
        settings: FoxSourceSettings | None = None,
        *,
        use_stores: bool = True,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Application settings. If not provided, loaded from environment.
            use_stores: Whether to connect to Redis for linked accounts and chat config.
        """
        self._settings = settings or FoxSourceSettings()
        self._use_stores = use_stores
        self._registry: ResolverRegistry | None = None
        self._redis: AsyncRedisClient | None = None
        self._fuzzysearch: FuzzySearchClient | None = None
        self.credential_store: RedisCredentialStore | None = None
        self.chat_config_store: RedisChatConfigStore | None = None

    async def __aenter__(self) -> FoxSourceClient:
        """Initialize resources on context entry."""
        await self._initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Clean up resources on context exit."""
        await self.close()

    async def _initialize(self) -> None:
        """Initialize client resources."""
        if self._use_stores and self._settings.redis_url:
            self._redis = AsyncRedisClient(str(self._settings.redis_url))
            await self._redis.connect()
            self.credential_store = RedisCredentialStore(self._redis)
            self.chat_config_store = RedisChatConfigStore(self._redis)
            logger.info("Redis stores initialized")

        if self._settings.fuzzysearch_api_key:
            self._fuzzysearch = FuzzySearchClient(
                self._settings.fuzzysearch_api_key,
                self._settings.fuzzysearch_endpoint,
            )
        else:
            logger.warning("No FuzzySearch API key, reverse image lookups are disabled")

        self._registry = ResolverRegistry.from_settings(
            self._settings,
            fuzzysearch=self._fuzzysearch,
            credential_store=self.credential_store,
        )

    async def close(self) -> None:
        """Close all resources."""
        if self._registry:
            await self._registry.close_all()
            self._registry = None

        if self._fuzzysearch:
            await self._fuzzysearch.close()
            self._fuzzysearch = None

        if self._redis:
            await self._redis.close()
            self._redis = None
            self.credential_store = None
            self.chat_config_store = None

    def _ensure_initialized(self) -> ResolverRegistry:
        """Ensure client is initialized."""
        if self._registry is None:
            raise RuntimeError(
                "Client not initialized. Use 'async with FoxSourceClient() as client:'"
            )
        return self._registry

    @property
    def registry(self) -> ResolverRegistry:
        return self._ensure_initialized()

    @property
    def fuzzysearch(self) -> FuzzySearchClient | None:
        return self._fuzzysearch

    async def resolve(self, user_id: int, url: str) -> ResolutionResult:
        """
        Resolve a URL into media records.

        Args:
            user_id: ID of the user asking, used for linked accounts
            url: Any URL

        Returns:
            Result carrying the records and which site produced them
        """
        registry = self._ensure_initialized()
        start = time.monotonic()

        def elapsed() -> float:
            return (time.monotonic() - start) * 1000

        resolver = await registry.find_provider(url)
        if resolver is None:
            return ResolutionResult(
                status=ResolutionStatus.UNSUPPORTED,
                duration_ms=elapsed(),
            )

        try:
            records = await resolver.fetch(user_id, url)
        except FoxSourceError as e:
            logger.warning("%s failed to resolve %s: %s", resolver.name, url, e)
            return ResolutionResult(
                status=ResolutionStatus.ERROR,
                error_message=str(e),
                source=resolver.name,
                duration_ms=elapsed(),
            )

        if not records:
            return ResolutionResult(
                status=ResolutionStatus.NO_CONTENT,
                source=resolver.name,
                duration_ms=elapsed(),
            )

        return ResolutionResult(
            status=ResolutionStatus.SUCCESS,
            records=records,
            source=resolver.name,
            duration_ms=elapsed(),
        )


async def resolve_url(
    user_id: int,
    url: str,
    *,
    settings: FoxSourceSettings | None = None,
) -> ResolutionResult:
    """
    Resolve a single URL (convenience function).

    For multiple resolutions, use FoxSourceClient to reuse connections.
    """
    async with FoxSourceClient(settings) as client:
        return await client.resolve(user_id, url)
