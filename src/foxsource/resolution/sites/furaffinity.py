"""FurAffinity resolver implementation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import ClassVar

import cloudscraper
import httpx
from bs4 import BeautifulSoup

from foxsource.core.exceptions import FoxSourceError, ResolverUnavailableError, SchemaError
from foxsource.core.models import PostInfo
from foxsource.core.types import SiteName
from foxsource.core.urls import get_file_ext
from foxsource.fuzzysearch import FuzzySearchClient
from foxsource.resolution.base import AbstractResolver, ResolverConfig

logger = logging.getLogger(__name__)

# Takes the page URL and User-Agent, returns a "name=value; name=value" cookie string
ChallengeSolver = Callable[[str, str], Awaitable[str]]

CHALLENGE_STATUSES = frozenset({429, 503})


async def solve_cloudflare_challenge(url: str, user_agent: str) -> str:
    """Solve an anti-bot challenge with cloudscraper, off the event loop."""
    cookies, _ = await asyncio.to_thread(
        cloudscraper.get_cookie_string,
        url,
        user_agent=user_agent,
    )
    return cookies


def parse_cookie_string(cookies: str) -> dict[str, str]:
    """Parse a Cookie header style string into a mapping."""
    parsed = {}
    for cookie in cookies.split(";"):
        cookie = cookie.strip()
        if not cookie:
            continue
        name, sep, value = cookie.partition("=")
        if not sep or not name:
            raise ValueError(f"missing cookie data in {cookie!r}")
        parsed[name.strip()] = value.strip()
    return parsed


class FurAffinityResolver(AbstractResolver):
    """
    FurAffinity resolver for submission pages and direct file links.

    Submission pages are scraped with the configured account cookies. When
    the site answers with an anti-bot challenge, the challenge is solved
    once and the request retried with the resulting cookies.
    """

    SITE_NAME: ClassVar[SiteName] = SiteName.FURAFFINITY
    SUBMISSION_MARKERS: ClassVar[tuple[str, ...]] = (
        "furaffinity.net/view/",
        "furaffinity.net/full/",
    )
    DIRECT_MARKER: ClassVar[str] = "facdn.net/art/"
    IMAGE_SELECTOR: ClassVar[str] = "#submissionImg"

    def __init__(
        self,
        cookies: tuple[str, str],
        fuzzysearch: FuzzySearchClient | None = None,
        challenge_solver: ChallengeSolver | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        super().__init__(config)
        self._cookies: dict[str, str] = {"a": cookies[0], "b": cookies[1]}
        self._cookie_lock = asyncio.Lock()
        self._fuzzysearch = fuzzysearch
        self._solve_challenge = challenge_solver or solve_cloudflare_challenge

    @property
    def priority(self) -> int:
        return 30

    @property
    def cookies(self) -> dict[str, str]:
        """A copy of the current session cookies."""
        return dict(self._cookies)

    async def supports(self, url: str) -> bool:
        return any(marker in url for marker in self.SUBMISSION_MARKERS) or (
            self.DIRECT_MARKER in url
        )

    def _cookie_header(self) -> str:
        return "; ".join(f"{name}={value}" for name, value in self._cookies.items())

    async def load_direct_url(self, url: str) -> PostInfo:
        """Resolve a direct file link through the hash-search URL index."""
        if url.startswith("http://"):
            url = url.replace("http://", "https://", 1)

        results = []
        if self._fuzzysearch is not None:
            try:
                results = await self._fuzzysearch.lookup_url(url)
            except FoxSourceError as e:
                logger.debug("URL lookup failed for %s: %s", url, e)

        if not results:
            return PostInfo(
                file_type=self._file_type(url),
                url=url,
                site_name=self.name.value,
            )

        sub = results[0]
        return PostInfo(
            file_type=get_file_ext(sub.filename) or self._file_type(sub.url),
            url=sub.url,
            source_link=sub.source_url(),
            site_name=self.name.value,
        )

    async def _request_submission(self, url: str, operation: str) -> httpx.Response:
        return await self._make_request(
            "GET",
            url,
            operation=operation,
            headers={"Cookie": self._cookie_header()},
        )

    async def _refresh_cookies(self, url: str) -> bool:
        """Solve an anti-bot challenge and merge the new cookies into the jar."""
        try:
            cookie_string = await self._solve_challenge(url, self.config.user_agent)
            cookies = parse_cookie_string(cookie_string)
        except Exception as e:
            # cloudscraper raises a variety of its own and requests' exceptions
            logger.warning("Unable to solve FurAffinity challenge: %s", e)
            return False

        async with self._cookie_lock:
            self._cookies.update(cookies)
        return True

    async def load_submission(self, url: str) -> PostInfo | None:
        """Scrape a submission page for its full-size image."""
        response = await self._request_submission(url, "request furaffinity submission")

        if response.status_code in CHALLENGE_STATUSES:
            logger.info("FurAffinity challenge encountered, status %s", response.status_code)
            if await self._refresh_cookies(url):
                response = await self._request_submission(
                    url,
                    "send furaffinity request with challenge cookies",
                )

        if not response.is_success and response.status_code not in CHALLENGE_STATUSES:
            raise ResolverUnavailableError(
                message=f"unable to request furaffinity submission: HTTP {response.status_code}",
                source=self.name.value,
                status_code=response.status_code,
            )

        body = BeautifulSoup(response.text, "html.parser")
        img = body.select_one(self.IMAGE_SELECTOR)
        if img is None:
            return None

        src = img.get("src")
        if not src:
            raise SchemaError(message="furaffinity was missing src", source=self.name.value)

        if src.startswith("//"):
            image_url = f"https:{src}"
        elif src.startswith("http://"):
            image_url = src.replace("http://", "https://", 1)
        else:
            image_url = src

        return PostInfo(
            file_type=self._file_type(image_url),
            url=image_url,
            source_link=url,
            site_name=self.name.value,
        )

    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        if self.DIRECT_MARKER in url:
            post = await self.load_direct_url(url)
        else:
            post = await self.load_submission(url)

        return [post] if post is not None else None
