"""Weasyl resolver implementation."""

from __future__ import annotations

import re
from typing import ClassVar

from foxsource.core.exceptions import SchemaError
from foxsource.core.models import PostInfo
from foxsource.core.types import SiteName
from foxsource.resolution.base import AbstractResolver, ResolverConfig, require_field


class WeasylResolver(AbstractResolver):
    """
    Weasyl API resolver.

    API Documentation: https://projects.weasyl.com/weasylapi/
    """

    SITE_NAME: ClassVar[SiteName] = SiteName.WEASYL
    BASE_URL: ClassVar[str] = "https://www.weasyl.com"
    PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"https?://www\.weasyl\.com/(?:(?:~|%7)(?:\w+)/submissions|submission)/(?P<id>\d+)(?:/\S+)"
    )

    def __init__(self, config: ResolverConfig | None = None) -> None:
        super().__init__(config)
        if not config or not config.api_key:
            raise ValueError("Weasyl requires an API key")
        self._api_key = config.api_key

    @property
    def priority(self) -> int:
        return 40

    def _get_default_headers(self) -> dict[str, str]:
        headers = super()._get_default_headers()
        headers["X-Weasyl-API-Key"] = self._api_key
        return headers

    async def supports(self, url: str) -> bool:
        return self.PATTERN.search(url) is not None

    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        match = self.PATTERN.search(url)
        if match is None:
            raise ValueError(f"Unsupported Weasyl URL: {url}")

        data = await self._get_json(
            "GET",
            f"/api/submissions/{match['id']}/view",
            operation="request weasyl api",
        )

        source = self.name.value
        submissions = require_field(data, ("media", "submission"), source)
        if not isinstance(submissions, list):
            raise SchemaError(message="weasyl media.submission was not a list", source=source)
        if not submissions:
            return None

        thumbnails = require_field(data, ("media", "thumbnail"), source)
        if not isinstance(thumbnails, list):
            raise SchemaError(message="weasyl media.thumbnail was not a list", source=source)

        posts = []
        for submission, thumbnail in zip(submissions, thumbnails):
            sub_url = require_field(submission, ("url",), source)
            thumb_url = require_field(thumbnail, ("url",), source)

            posts.append(
                PostInfo(
                    file_type=self._file_type(sub_url),
                    url=sub_url,
                    thumb=thumb_url,
                    source_link=url,
                    site_name=source,
                )
            )

        return posts
