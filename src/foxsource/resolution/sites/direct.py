"""Direct image link resolver with best-effort source enrichment."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import ClassVar

import httpx

from foxsource.core.exceptions import FoxSourceError
from foxsource.core.models import File, PostInfo
from foxsource.core.types import EnrichmentStatus, SiteName
from foxsource.core.urls import get_file_ext
from foxsource.fuzzysearch import FuzzySearchClient
from foxsource.resolution.base import AbstractResolver, ResolverConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichmentResult:
    """Outcome of a reverse image lookup, including the timeout case."""

    status: EnrichmentStatus
    match: File | None = None

    @property
    def matched(self) -> bool:
        return self.status == EnrichmentStatus.MATCHED and self.match is not None


class DirectResolver(AbstractResolver):
    """
    Resolver for links pointing straight at an image file.

    Used as the catch-all after every site-specific resolver. Fetching
    tries to find where the image was originally posted, but never fails
    because of that lookup.
    """

    SITE_NAME: ClassVar[SiteName] = SiteName.DIRECT
    EXTENSIONS: ClassVar[tuple[str, ...]] = ("png", "jpg", "jpeg", "gif")
    TYPES: ClassVar[tuple[str, ...]] = ("image/png", "image/jpeg", "image/gif")

    # Deadline for the whole download + hash search, in seconds
    ENRICHMENT_TIMEOUT: ClassVar[float] = 4.0

    def __init__(
        self,
        fuzzysearch: FuzzySearchClient | None,
        config: ResolverConfig | None = None,
    ) -> None:
        super().__init__(config or ResolverConfig(timeout=2.0))
        self._fuzzysearch = fuzzysearch

    @property
    def priority(self) -> int:
        return 1000  # Catch-all, always last

    async def supports(self, url: str) -> bool:
        if get_file_ext(url) not in self.EXTENSIONS:
            return False

        try:
            response = await self._make_request("HEAD", url, operation="check direct link")
        except FoxSourceError as e:
            logger.debug("Direct link check failed for %s: %s", url, e)
            return False

        if not response.is_success:
            return False

        content_type = response.headers.get("content-type")
        if content_type is None:
            return False

        return content_type.split(";", 1)[0].strip().lower() in self.TYPES

    async def reverse_search(self, url: str) -> EnrichmentResult:
        """
        Look up the original source of an image, bounded by a deadline.

        Never raises; failures are reported through the result status.
        """
        if self._fuzzysearch is None:
            return EnrichmentResult(EnrichmentStatus.NO_MATCH)

        try:
            async with asyncio.timeout(self.ENRICHMENT_TIMEOUT):
                response = await self._make_request("GET", url, operation="download image")
                response.raise_for_status()
                matches = await self._fuzzysearch.search_exact(response.content)
        except TimeoutError:
            logger.debug("Reverse search timed out for %s", url)
            return EnrichmentResult(EnrichmentStatus.TIMEOUT)
        except (httpx.HTTPError, FoxSourceError) as e:
            logger.debug("Reverse search failed for %s: %s", url, e)
            return EnrichmentResult(EnrichmentStatus.ERROR)

        if not matches:
            logger.debug("No posts matched %s", url)
            return EnrichmentResult(EnrichmentStatus.NO_MATCH)

        logger.debug("Found ID of post matching: %s", matches[0].id)
        return EnrichmentResult(EnrichmentStatus.MATCHED, matches[0])

    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        enrichment = await self.reverse_search(url)

        source_link = None
        site_name = self.name.value
        if enrichment.matched:
            source_link = enrichment.match.source_url()
            site_name = enrichment.match.site_name

        return [
            PostInfo(
                file_type=self._file_type(url),
                url=url,
                source_link=source_link,
                site_name=site_name,
            )
        ]
