"""Mastodon resolver implementation."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import ClassVar

from foxsource.core.exceptions import FoxSourceError
from foxsource.core.models import PostInfo
from foxsource.core.types import SiteName
from foxsource.resolution.base import AbstractResolver, ResolverConfig, require_field

logger = logging.getLogger(__name__)


class MastodonResolver(AbstractResolver):
    """
    Resolver for statuses on any Mastodon-compatible instance.

    Whether a host runs Mastodon is only known after probing its instance
    API. Hosts that fail the probe are remembered and never probed again;
    hosts that pass are probed on every call.
    """

    SITE_NAME: ClassVar[SiteName] = SiteName.MASTODON
    PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"(?P<host>https?://(?:\S+))/(?:notice|users/\w+/statuses|@\w+)/(?P<id>\d+)"
    )

    def __init__(self, config: ResolverConfig | None = None) -> None:
        super().__init__(config)
        self._instance_cache: dict[str, bool] = {}
        self._cache_lock = asyncio.Lock()

    @property
    def priority(self) -> int:
        return 900  # Probes the network, so ask after every pattern-only site

    def is_known_unsupported(self, host: str) -> bool:
        return self._instance_cache.get(host) is False

    async def _mark_unsupported(self, host: str) -> None:
        async with self._cache_lock:
            self._instance_cache[host] = False

    async def supports(self, url: str) -> bool:
        match = self.PATTERN.search(url)
        if match is None:
            return False

        host = match["host"]
        if self.is_known_unsupported(host):
            return False

        try:
            response = await self._make_request(
                "HEAD",
                f"{host}/api/v1/instance",
                operation="probe mastodon instance",
            )
        except FoxSourceError as e:
            logger.debug("Mastodon probe of %s failed: %s", host, e)
            await self._mark_unsupported(host)
            return False

        if not response.is_success:
            logger.debug("%s is not a Mastodon instance (HTTP %s)", host, response.status_code)
            await self._mark_unsupported(host)
            return False

        return True

    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        match = self.PATTERN.search(url)
        if match is None:
            raise ValueError(f"Unsupported Mastodon URL: {url}")

        status = await self._get_json(
            "GET",
            f"{match['host']}/api/v1/statuses/{match['id']}",
            operation="request mastodon api",
        )

        source = self.name.value
        attachments = require_field(status, ("media_attachments",), source)
        if not attachments:
            return None

        status_url = require_field(status, ("url",), source)

        posts = []
        for media in attachments:
            media_url = require_field(media, ("url",), source)
            posts.append(
                PostInfo(
                    file_type=self._file_type(media_url),
                    url=media_url,
                    thumb=require_field(media, ("preview_url",), source),
                    source_link=status_url,
                    site_name=source,
                )
            )

        return posts
