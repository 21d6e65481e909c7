"""e621 resolver implementation."""

from __future__ import annotations

import re
from typing import ClassVar

from foxsource.core.models import PostInfo
from foxsource.core.types import SiteName
from foxsource.resolution.base import (
    AbstractResolver,
    RateLimitConfig,
    ResolverConfig,
    require_field,
)


class E621Resolver(AbstractResolver):
    """
    e621/e926 resolver for post pages and static file links.

    API Documentation: https://e621.net/help/api
    """

    SITE_NAME: ClassVar[SiteName] = SiteName.E621
    BASE_URL: ClassVar[str] = "https://e621.net"
    DEFAULT_RATE_LIMIT: ClassVar[RateLimitConfig] = RateLimitConfig(
        requests_per_second=2.0,  # Hard limit enforced by the API
        burst_size=1,
    )

    SHOW_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"https?://(?P<host>e(?:621|926)\.net)/(?:post/show/|posts/)(?P<id>\d+)(?:/(?P<tags>.+))?"
    )
    DATA_PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"https?://(?P<host>static\d+\.e(?:621|926)\.net)/data/"
        r"(?:(?P<modifier>sample|preview)/)?[0-9a-f]{2}/[0-9a-f]{2}/"
        r"(?P<md5>[0-9a-f]{32})\.(?P<ext>.+)"
    )

    def __init__(self, config: ResolverConfig | None = None) -> None:
        super().__init__(config)

    @property
    def priority(self) -> int:
        return 10

    async def supports(self, url: str) -> bool:
        return bool(self.SHOW_PATTERN.search(url) or self.DATA_PATTERN.search(url))

    def _endpoint(self, url: str) -> tuple[str, dict[str, str] | None]:
        if match := self.SHOW_PATTERN.search(url):
            return f"/posts/{match['id']}.json", None

        match = self.DATA_PATTERN.search(url)
        if match is None:
            raise ValueError(f"Unsupported e621 URL: {url}")
        return "/posts.json", {"md5": match["md5"]}

    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        path, params = self._endpoint(url)
        data = await self._get_json("GET", path, operation="request e621 api", params=params)

        source = self.name.value
        post_id = require_field(data, ("post", "id"), source)
        file_url = require_field(data, ("post", "file", "url"), source)
        file_ext = require_field(data, ("post", "file", "ext"), source)
        preview_url = require_field(data, ("post", "preview", "url"), source)

        return [
            PostInfo(
                file_type=str(file_ext).lower(),
                url=file_url,
                thumb=preview_url,
                source_link=f"https://e621.net/posts/{post_id}",
                site_name=source,
            )
        ]
