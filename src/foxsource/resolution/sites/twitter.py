"""Twitter resolver implementation."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING, Any, ClassVar

import tweepy

from foxsource.core.exceptions import ResolverUnavailableError, SchemaError, StoreError
from foxsource.core.models import PostInfo
from foxsource.core.types import SiteName
from foxsource.resolution.base import AbstractResolver, ResolverConfig, require_field

if TYPE_CHECKING:
    from foxsource.stores.protocols import CredentialStore

logger = logging.getLogger(__name__)

TwitterAuth = tweepy.OAuth1UserHandler | tweepy.OAuth2BearerHandler


def get_best_video(media: dict[str, Any]) -> str | None:
    """
    Pick the highest bitrate variant of a video or animated GIF.

    Variants without a bitrate (such as HLS playlists) count as 0. The first
    variant wins a tie. Returns None for still images.
    """
    video_info = media.get("video_info")
    if not video_info:
        return None

    variants = video_info.get("variants") or []
    if not variants:
        return None

    best = max(variants, key=lambda variant: variant.get("bitrate") or 0)
    return best.get("url")


class TwitterResolver(AbstractResolver):
    """
    Twitter resolver using the v1.1 statuses API.

    Requests are made with the requesting user's linked account when one
    exists, so protected tweets they can see are resolvable. Otherwise the
    app-only bearer token is used.
    """

    SITE_NAME: ClassVar[SiteName] = SiteName.TWITTER
    PATTERN: ClassVar[re.Pattern[str]] = re.compile(
        r"https://(?:mobile\.)?twitter.com/(?:\w+)/status/(?P<id>\d+)"
    )
    TOKEN_URL: ClassVar[str] = "https://api.twitter.com/oauth2/token"

    # Token endpoint statuses meaning the consumer keys were refused
    REJECTED_STATUSES: ClassVar[frozenset[int]] = frozenset({401, 403})

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        credential_store: CredentialStore | None = None,
        bearer_token: str | None = None,
        config: ResolverConfig | None = None,
    ) -> None:
        super().__init__(config)
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._credentials = credential_store

        self._app_auth: TwitterAuth | None = None
        if bearer_token:
            self._app_auth = tweepy.OAuth2BearerHandler(bearer_token)
        self._app_auth_lock = asyncio.Lock()

    @property
    def priority(self) -> int:
        return 20

    async def supports(self, url: str) -> bool:
        return self.PATTERN.search(url) is not None

    async def _get_app_auth(self) -> TwitterAuth:
        """Get the app-only auth handler, requesting a bearer token once."""
        self._check_fatal()

        async with self._app_auth_lock:
            if self._app_auth is not None:
                return self._app_auth

            try:
                data = await self._get_json(
                    "POST",
                    self.TOKEN_URL,
                    operation="get twitter bearer token",
                    auth=(self._consumer_key, self._consumer_secret),
                    data={"grant_type": "client_credentials"},
                )
            except ResolverUnavailableError as e:
                if e.status_code in self.REJECTED_STATUSES:
                    raise self._fail_fatally(
                        f"Twitter consumer credentials were rejected: HTTP {e.status_code}"
                    ) from e
                raise

            if not isinstance(data, dict) or data.get("token_type") != "bearer":
                raise SchemaError(
                    message="twitter token response was not a bearer token",
                    source=self.name.value,
                )

            token = require_field(data, ("access_token",), self.name.value)
            self._app_auth = tweepy.OAuth2BearerHandler(token)
            return self._app_auth

    async def _get_auth(self, user_id: int) -> TwitterAuth:
        """Resolve the credentials to use for a user."""
        logger.debug("Attempting to find saved credentials for user %s", user_id)

        account = None
        if self._credentials is not None:
            try:
                account = await self._credentials.get_linked_credential(user_id)
            except StoreError as e:
                raise ResolverUnavailableError(
                    message=f"unable to query twitter account: {e}",
                    source=self.name.value,
                ) from e

        if account is None:
            return await self._get_app_auth()

        return tweepy.OAuth1UserHandler(
            self._consumer_key,
            self._consumer_secret,
            account.key,
            account.secret,
        )

    async def _show_tweet(self, auth: TwitterAuth, tweet_id: int) -> dict[str, Any]:
        """Load a tweet with full text and extended entities."""
        api = tweepy.API(auth, timeout=self.config.timeout)

        try:
            status = await asyncio.to_thread(
                api.get_status,
                tweet_id,
                tweet_mode="extended",
                include_entities=True,
            )
        except tweepy.errors.HTTPException as e:
            raise ResolverUnavailableError(
                message=f"unable to request twitter api: {e}",
                source=self.name.value,
                status_code=e.response.status_code if e.response is not None else None,
            ) from e
        except tweepy.errors.TweepyException as e:
            raise ResolverUnavailableError(
                message=f"unable to request twitter api: {e}",
                source=self.name.value,
            ) from e

        return status._json

    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        match = self.PATTERN.search(url)
        if match is None:
            raise ValueError(f"Unsupported Twitter URL: {url}")

        auth = await self._get_auth(user_id)
        tweet = await self._show_tweet(auth, int(match["id"]))

        source = self.name.value
        user = require_field(tweet, ("user",), source)
        screen_name = require_field(user, ("screen_name",), source)
        protected = bool(user.get("protected", False))

        media = (tweet.get("extended_entities") or {}).get("media")
        if not media:
            return None

        text = tweet.get("full_text") or tweet.get("text")

        posts = []
        for item in media:
            image_url = require_field(item, ("media_url_https",), source)
            media_url = get_best_video(item) or image_url

            posts.append(
                PostInfo(
                    file_type=self._file_type(media_url),
                    url=media_url,
                    thumb=f"{image_url}:thumb",
                    source_link=require_field(item, ("expanded_url",), source),
                    personal=protected,
                    title=screen_name,
                    extra_caption=text,
                    site_name=source,
                )
            )

        return posts
