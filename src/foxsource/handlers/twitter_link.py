"""Linking a user's Twitter account through the PIN based OAuth flow."""

from __future__ import annotations

import asyncio
import logging

import requests
import tweepy

from foxsource.core.exceptions import ResolverUnavailableError
from foxsource.core.messages import ChatMessage
from foxsource.core.models import LinkedCredential
from foxsource.core.types import HandlerStatus, SiteName
from foxsource.handlers.base import ChatTransport, Localizer
from foxsource.stores.protocols import CredentialStore

logger = logging.getLogger(__name__)


class TwitterLinkHandler:
    """
    Links Twitter accounts so protected tweets can be resolved.

    start() hands the user an authorization URL; Twitter then shows them a
    PIN, which they send back as a plain message and handle() completes.
    """

    name = "text"

    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        credential_store: CredentialStore,
        transport: ChatTransport,
        localizer: Localizer,
    ) -> None:
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self._credentials = credential_store
        self._transport = transport
        self._localizer = localizer

    def _auth_handler(self) -> tweepy.OAuth1UserHandler:
        return tweepy.OAuth1UserHandler(
            self._consumer_key,
            self._consumer_secret,
            callback="oob",
        )

    async def start(self, user_id: int) -> str:
        """Begin linking an account, returning the URL the user must visit."""
        auth = self._auth_handler()
        try:
            url = await asyncio.to_thread(auth.get_authorization_url)
        except (tweepy.errors.TweepyException, requests.RequestException) as e:
            raise ResolverUnavailableError(
                message=f"unable to get twitter request token: {e}",
                source=SiteName.TWITTER.value,
            ) from e

        await self._credentials.set_request_token(
            user_id,
            LinkedCredential(
                key=auth.request_token["oauth_token"],
                secret=auth.request_token["oauth_token_secret"],
            ),
        )
        return url

    def _exchange_pin_sync(
        self,
        request_token: LinkedCredential,
        pin: str,
    ) -> tuple[LinkedCredential, str]:
        auth = self._auth_handler()
        auth.request_token = {
            "oauth_token": request_token.key,
            "oauth_token_secret": request_token.secret,
        }
        access_key, access_secret = auth.get_access_token(pin)
        user = tweepy.API(auth).verify_credentials()
        return LinkedCredential(key=access_key, secret=access_secret), user.screen_name

    async def _exchange_pin(
        self,
        request_token: LinkedCredential,
        pin: str,
    ) -> tuple[LinkedCredential, str]:
        """Trade a PIN for an access token and the account's screen name."""
        try:
            return await asyncio.to_thread(self._exchange_pin_sync, request_token, pin)
        except (tweepy.errors.TweepyException, requests.RequestException) as e:
            raise ResolverUnavailableError(
                message=f"unable to get twitter access token: {e}",
                source=SiteName.TWITTER.value,
            ) from e

    async def handle(self, message: ChatMessage) -> HandlerStatus:
        if message.text is None or message.from_user is None:
            return HandlerStatus.IGNORED

        pin = message.text.strip()
        try:
            int(pin)
        except ValueError:
            logger.debug("Got text that wasn't a PIN, ignoring")
            return HandlerStatus.IGNORED

        user = message.from_user
        request_token = await self._credentials.get_request_token(user.id)
        if request_token is None:
            return HandlerStatus.IGNORED

        logger.debug("User %s had a pending Twitter request token", user.id)

        access, screen_name = await self._exchange_pin(request_token, pin)
        await self._credentials.set_linked_credential(user.id, access)
        await self._credentials.delete_request_token(user.id)

        text = await self._localizer.get_message(
            user.language_code,
            "twitter-welcome",
            {"userName": screen_name},
        )
        await self._transport.send_message(user.id, text, reply_to=message.message_id)

        return HandlerStatus.COMPLETED
