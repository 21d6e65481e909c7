"""Async client for the FuzzySearch perceptual hash-search API."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from foxsource.core.exceptions import HashSearchError
from foxsource.core.models import File
from foxsource.core.types import MatchType

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.fuzzysearch.net"

_FILES = TypeAdapter(list[File])


class FuzzySearchClient:
    """
    Async wrapper for FuzzySearch operations.

    Provides image searches by content and lookups by direct file URL.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 10.0,
    ) -> None:
        """
        Initialize the FuzzySearch client.

        Args:
            api_key: API key sent with every request
            endpoint: Base URL of the API
            timeout: Connect/read timeout in seconds
        """
        self._api_key = api_key
        self._endpoint = endpoint.rstrip("/")
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self._endpoint,
                timeout=httpx.Timeout(self._timeout),
                headers={"x-api-key": self._api_key},
            )
        return self._client

    async def close(self) -> None:
        """Close the client connection."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        client = self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise HashSearchError(f"unable to request fuzzysearch {path}: {e}") from e
        except ValueError as e:
            raise HashSearchError(f"unable to decode fuzzysearch {path} response") from e

    def _parse_files(self, data: Any) -> list[File]:
        try:
            return _FILES.validate_python(data)
        except ValidationError as e:
            raise HashSearchError(f"unexpected fuzzysearch response: {e}") from e

    async def image_search(self, data: bytes, match_type: MatchType) -> list[File]:
        """
        Search for images visually similar to the provided bytes.

        Returns:
            Matches ordered as returned by the API
        """
        body = await self._request(
            "POST",
            "/image",
            params={"type": match_type.value},
            files={"image": ("image", data)},
        )

        matches = body.get("matches") if isinstance(body, dict) else None
        if matches is None:
            raise HashSearchError("fuzzysearch image response was missing matches")

        files = self._parse_files(matches)
        logger.debug("Image search (%s) returned %d matches", match_type, len(files))
        return files

    async def search_exact(self, data: bytes) -> list[File]:
        """Find files with exactly the same hash."""
        return await self.image_search(data, MatchType.EXACT)

    async def search_ranked(self, data: bytes) -> list[File]:
        """Find close matches, each with a distance score."""
        return await self.image_search(data, MatchType.CLOSE)

    async def lookup_url(self, url: str) -> list[File]:
        """Look up indexed files by their direct URL."""
        body = await self._request("GET", "/url", params={"url": url})
        return self._parse_files(body)

    async def __aenter__(self) -> FuzzySearchClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
