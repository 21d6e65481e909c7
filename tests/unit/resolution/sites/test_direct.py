"""Tests for the direct link resolver."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest
import respx
from httpx import Response

from foxsource.core.exceptions import HashSearchError
from foxsource.core.types import EnrichmentStatus, SiteName
from foxsource.resolution.sites.direct import DirectResolver

IMAGE_URL = "https://files.example.com/art/fox.png"


@pytest.fixture
def resolver(fuzzysearch: AsyncMock) -> DirectResolver:
    """Create a direct resolver with a hash-search stand-in."""
    return DirectResolver(fuzzysearch)


# ============================================================================
# Resolver Configuration Tests
# ============================================================================


class TestDirectResolverConfig:
    """Tests for direct resolver configuration."""

    def test_site_name(self, resolver: DirectResolver):
        assert resolver.name == SiteName.DIRECT
        assert resolver.name.value == "direct link"

    def test_priority_is_last(self, resolver: DirectResolver):
        """Direct links are the catch-all after every site resolver."""
        assert resolver.priority == 1000

    def test_default_timeout(self, resolver: DirectResolver):
        assert resolver.config.timeout == 2.0


# ============================================================================
# Support Check Tests
# ============================================================================


class TestDirectSupports:
    """Tests for the extension and content type checks."""

    async def test_rejects_unknown_extension_without_request(self, resolver: DirectResolver):
        with respx.mock(assert_all_mocked=True) as router:
            assert await resolver.supports("https://files.example.com/art/fox.webp") is False
            assert router.calls.call_count == 0

    async def test_rejects_path_without_extension(self, resolver: DirectResolver):
        with respx.mock(assert_all_mocked=True) as router:
            assert await resolver.supports("https://files.example.com/gallery/notpng") is False
            assert router.calls.call_count == 0

    @respx.mock
    async def test_extension_ignores_query_string(self, resolver: DirectResolver):
        url = "https://files.example.com/art/fox.png?size=large"
        respx.head(url).mock(return_value=Response(200, headers={"Content-Type": "image/png"}))

        assert await resolver.supports(url) is True

    @respx.mock
    async def test_accepts_image_content_type(self, resolver: DirectResolver):
        respx.head(IMAGE_URL).mock(
            return_value=Response(200, headers={"Content-Type": "image/png"})
        )

        assert await resolver.supports(IMAGE_URL) is True

    @respx.mock
    async def test_accepts_content_type_with_parameters(self, resolver: DirectResolver):
        url = "https://files.example.com/art/fox.JPG"
        respx.head(url).mock(
            return_value=Response(200, headers={"Content-Type": "image/jpeg; charset=binary"})
        )

        assert await resolver.supports(url) is True

    @respx.mock
    async def test_rejects_html_behind_image_extension(self, resolver: DirectResolver):
        respx.head(IMAGE_URL).mock(
            return_value=Response(200, headers={"Content-Type": "text/html"})
        )

        assert await resolver.supports(IMAGE_URL) is False

    @respx.mock
    async def test_rejects_missing_content_type(self, resolver: DirectResolver):
        respx.head(IMAGE_URL).mock(return_value=Response(200))

        assert await resolver.supports(IMAGE_URL) is False

    @respx.mock
    async def test_network_failure_is_unsupported(self, resolver: DirectResolver):
        respx.head(IMAGE_URL).mock(side_effect=httpx.ConnectError("refused"))

        assert await resolver.supports(IMAGE_URL) is False


# ============================================================================
# Enrichment Tests
# ============================================================================


class TestDirectEnrichment:
    """Tests for the best-effort reverse image lookup."""

    @respx.mock
    async def test_match_sets_source(
        self, resolver: DirectResolver, fuzzysearch: AsyncMock, make_file
    ):
        respx.get(IMAGE_URL).mock(return_value=Response(200, content=b"image-bytes"))
        fuzzysearch.search_exact.return_value = [make_file("FurAffinity", 1234, 0)]

        records = await resolver.fetch(1, IMAGE_URL)

        assert len(records) == 1
        record = records[0]
        assert record.url == IMAGE_URL
        assert record.file_type == "png"
        assert record.source_link == "https://www.furaffinity.net/view/1234/"
        assert record.site_name == "FurAffinity"
        fuzzysearch.search_exact.assert_awaited_once_with(b"image-bytes")

    @respx.mock
    async def test_no_match_keeps_direct_link(self, resolver: DirectResolver):
        respx.get(IMAGE_URL).mock(return_value=Response(200, content=b"image-bytes"))

        records = await resolver.fetch(1, IMAGE_URL)

        assert records[0].source_link is None
        assert records[0].site_name == "direct link"

    @respx.mock
    async def test_search_failure_is_swallowed(
        self, resolver: DirectResolver, fuzzysearch: AsyncMock
    ):
        respx.get(IMAGE_URL).mock(return_value=Response(200, content=b"image-bytes"))
        fuzzysearch.search_exact.side_effect = HashSearchError("service down")

        result = await resolver.reverse_search(IMAGE_URL)
        records = await resolver.fetch(1, IMAGE_URL)

        assert result.status == EnrichmentStatus.ERROR
        assert records[0].source_link is None

    @respx.mock
    async def test_download_failure_is_swallowed(self, resolver: DirectResolver):
        respx.get(IMAGE_URL).mock(return_value=Response(404))

        result = await resolver.reverse_search(IMAGE_URL)

        assert result.status == EnrichmentStatus.ERROR
        assert result.matched is False

    @respx.mock
    async def test_slow_search_times_out(
        self, resolver: DirectResolver, fuzzysearch: AsyncMock, monkeypatch, make_file
    ):
        respx.get(IMAGE_URL).mock(return_value=Response(200, content=b"image-bytes"))
        monkeypatch.setattr(DirectResolver, "ENRICHMENT_TIMEOUT", 0.05)

        async def slow_search(data: bytes):
            await asyncio.sleep(1)
            return [make_file("e621", 1, 0)]

        fuzzysearch.search_exact.side_effect = slow_search

        result = await resolver.reverse_search(IMAGE_URL)
        records = await resolver.fetch(1, IMAGE_URL)

        assert result.status == EnrichmentStatus.TIMEOUT
        assert records[0].source_link is None

    async def test_without_search_client(self):
        resolver = DirectResolver(None)

        result = await resolver.reverse_search(IMAGE_URL)

        assert result.status == EnrichmentStatus.NO_MATCH
