"""Resolver registry for finding the resolver responsible for a URL."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import httpx

from foxsource.core.exceptions import FoxSourceError
from foxsource.resolution.base import AbstractResolver, ResolverConfig

if TYPE_CHECKING:
    from foxsource.config import FoxSourceSettings
    from foxsource.fuzzysearch import FuzzySearchClient
    from foxsource.stores.protocols import CredentialStore

logger = logging.getLogger(__name__)


class ResolverRegistry:
    """
    Ordered collection of site resolvers.

    Resolvers are asked in priority order whether they support a URL; the
    first one that does is responsible for it. Site-specific resolvers come
    before the generic direct link resolver.
    """

    def __init__(self, resolvers: list[AbstractResolver] | None = None) -> None:
        self._resolvers: list[AbstractResolver] = []
        for resolver in resolvers or []:
            self.register(resolver)

    @property
    def resolvers(self) -> list[AbstractResolver]:
        return list(self._resolvers)

    def register(self, resolver: AbstractResolver) -> None:
        """Register a resolver, keeping the list sorted by priority."""
        if not resolver.is_enabled:
            logger.debug("Skipping disabled resolver %s", resolver.name)
            return

        self._resolvers.append(resolver)
        # Stable sort keeps registration order among equal priorities
        self._resolvers.sort(key=lambda r: r.priority)

    async def _supports(self, resolver: AbstractResolver, url: str) -> bool:
        try:
            return await resolver.supports(url)
        except (FoxSourceError, httpx.HTTPError) as e:
            logger.warning("Resolver %s failed to check %s: %s", resolver.name, url, e)
            return False

    async def find_provider(self, url: str) -> AbstractResolver | None:
        """
        Find the resolver responsible for a URL.

        Returns:
            The first resolver supporting the URL, or None if it is unsupported
        """
        for resolver in self._resolvers:
            if await self._supports(resolver, url):
                logger.debug("URL %s is handled by %s", url, resolver.name)
                return resolver

        logger.debug("No resolver supports %s", url)
        return None

    @classmethod
    def from_settings(
        cls,
        settings: FoxSourceSettings,
        *,
        fuzzysearch: FuzzySearchClient | None = None,
        credential_store: CredentialStore | None = None,
    ) -> ResolverRegistry:
        """
        Create a registry with resolvers configured from settings.

        Resolvers whose credentials are missing are not registered.
        """
        from foxsource.resolution.sites import (
            DirectResolver,
            E621Resolver,
            FurAffinityResolver,
            InkbunnyResolver,
            MastodonResolver,
            TwitterResolver,
            WeasylResolver,
        )

        registry = cls()
        user_agent = f"foxsource/0.1 (+{settings.user_agent_contact})"

        def config(**kwargs) -> ResolverConfig:
            return ResolverConfig(user_agent=user_agent, **kwargs)

        registry.register(E621Resolver(config()))

        if settings.has_twitter:
            registry.register(
                TwitterResolver(
                    settings.twitter_consumer_key,
                    settings.twitter_consumer_secret,
                    credential_store=credential_store,
                    config=config(),
                )
            )

        if settings.has_furaffinity:
            registry.register(
                FurAffinityResolver(
                    (settings.fa_cookie_a, settings.fa_cookie_b),
                    fuzzysearch=fuzzysearch,
                    config=config(),
                )
            )

        if settings.weasyl_api_key:
            registry.register(WeasylResolver(config(api_key=settings.weasyl_api_key)))

        if settings.has_inkbunny:
            registry.register(
                InkbunnyResolver(
                    settings.inkbunny_username,
                    settings.inkbunny_password,
                    config=config(),
                )
            )

        registry.register(MastodonResolver(config()))
        registry.register(DirectResolver(fuzzysearch, config(timeout=2.0)))

        return registry

    async def close_all(self) -> None:
        """Close all registered resolvers."""
        for resolver in self._resolvers:
            await resolver.close()
