"""Inkbunny resolver implementation."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

from foxsource.core.exceptions import ResolutionError, SchemaError, SessionExpiredError
from foxsource.core.models import PostInfo
from foxsource.core.types import SiteName
from foxsource.resolution.base import AbstractResolver, ResolverConfig

logger = logging.getLogger(__name__)

# Error codes documented at https://wiki.inkbunny.net/wiki/API
ERROR_INVALID_LOGIN = 0
ERROR_SESSION_EXPIRED = 2

# Every rating (general through extreme) must be viewable
FULL_RATINGS_MASK = "11111"


class InkbunnyLogin(BaseModel):
    sid: str
    user_id: int
    ratingsmask: str


class InkbunnyFile(BaseModel):
    file_id: str
    file_name: str
    thumbnail_url_medium_noncustom: str
    file_url_screen: str


class InkbunnySubmission(BaseModel):
    submission_id: str
    files: list[InkbunnyFile]


class InkbunnySubmissions(BaseModel):
    results_count: int
    submissions: list[InkbunnySubmission]


class InkbunnyResolver(AbstractResolver):
    """
    Inkbunny API resolver.

    API Documentation: https://wiki.inkbunny.net/wiki/API

    Holds a session ID obtained by logging in with the configured account.
    An expired session is renewed once per request; any other API error
    aborts the request. Bad credentials or a restricted account are fatal
    and make every later call fail without contacting Inkbunny.
    """

    SITE_NAME: ClassVar[SiteName] = SiteName.INKBUNNY
    API_LOGIN: ClassVar[str] = "https://inkbunny.net/api_login.php"
    API_SUBMISSIONS: ClassVar[str] = "https://inkbunny.net/api_submissions.php"
    PATTERN: ClassVar[re.Pattern[str]] = re.compile(r"https?://inkbunny.net/s/(?P<id>\d+)")

    # Logins attempted per request after a session expires
    MAX_SESSION_RENEWALS: ClassVar[int] = 1

    def __init__(
        self,
        username: str,
        password: str,
        config: ResolverConfig | None = None,
    ) -> None:
        super().__init__(config)
        self._username = username
        self._password = password
        self._sid: str | None = None
        self._sid_lock = asyncio.Lock()

    @property
    def priority(self) -> int:
        return 50

    @property
    def has_session(self) -> bool:
        return self._sid is not None

    async def supports(self, url: str) -> bool:
        return self.PATTERN.search(url) is not None

    def _error_code(self, data: Any) -> int | None:
        if isinstance(data, dict) and "error_code" in data:
            try:
                return int(data["error_code"])
            except (TypeError, ValueError) as e:
                raise SchemaError(
                    message=f"inkbunny returned an invalid error code: {data['error_code']!r}",
                    source=self.name.value,
                ) from e
        return None

    async def _login(self) -> str:
        data = await self._get_json(
            "POST",
            self.API_LOGIN,
            operation="request inkbunny login",
            data={"username": self._username, "password": self._password},
        )

        error_code = self._error_code(data)
        if error_code == ERROR_INVALID_LOGIN:
            raise self._fail_fatally("Invalid Inkbunny username/password")
        if error_code is not None:
            raise self._fail_fatally(f"Unhandled Inkbunny login error code {error_code}")

        try:
            login = InkbunnyLogin.model_validate(data)
        except ValidationError as e:
            raise SchemaError(
                message=f"unable to parse inkbunny login: {e}",
                source=self.name.value,
            ) from e

        if login.ratingsmask != FULL_RATINGS_MASK:
            raise self._fail_fatally("Inkbunny user is missing viewing permissions")

        logger.debug("Logged in to Inkbunny as user %s", login.user_id)
        return login.sid

    async def get_sid(self) -> str:
        """Get the current session ID, logging in if there is none."""
        self._check_fatal()

        async with self._sid_lock:
            # A login may have failed fatally while this call was waiting
            self._check_fatal()
            if self._sid is None:
                self._sid = await self._login()
            return self._sid

    async def _invalidate_sid(self, sid: str) -> None:
        async with self._sid_lock:
            if self._sid == sid:
                self._sid = None

    async def _request_submissions(self, sid: str, ids: str) -> InkbunnySubmissions:
        data = await self._get_json(
            "POST",
            self.API_SUBMISSIONS,
            operation="request inkbunny submissions",
            data={"sid": sid, "submission_ids": ids},
        )

        error_code = self._error_code(data)
        if error_code == ERROR_SESSION_EXPIRED:
            raise SessionExpiredError(message="Inkbunny SID expired", source=self.name.value)
        if error_code is not None:
            raise ResolutionError(
                message=f"Unhandled Inkbunny error code {error_code}",
                source=self.name.value,
                details={"error_code": error_code},
            )

        try:
            return InkbunnySubmissions.model_validate(data)
        except ValidationError as e:
            raise SchemaError(
                message=f"unable to parse inkbunny submissions: {e}",
                source=self.name.value,
            ) from e

    async def get_submissions(self, ids: list[int]) -> InkbunnySubmissions:
        """
        Load submissions by ID.

        Raises:
            SessionExpiredError: if the session expired again after renewal
            ResolutionError: for any other API error code
        """
        joined = ",".join(str(sub_id) for sub_id in ids)

        renewals = 0
        while True:
            logger.debug("Attempting to load Inkbunny submissions %s", joined)
            sid = await self.get_sid()

            try:
                return await self._request_submissions(sid, joined)
            except SessionExpiredError:
                logger.info("Inkbunny SID expired")
                await self._invalidate_sid(sid)
                if renewals >= self.MAX_SESSION_RENEWALS:
                    raise
                renewals += 1

    async def fetch(self, user_id: int, url: str) -> list[PostInfo] | None:
        match = self.PATTERN.search(url)
        if match is None:
            raise ValueError(f"Unsupported Inkbunny URL: {url}")

        submissions = await self.get_submissions([int(match["id"])])

        posts = []
        for submission in submissions.submissions:
            for file in submission.files:
                posts.append(
                    PostInfo(
                        file_type=self._file_type(file.file_url_screen),
                        url=file.file_url_screen,
                        thumb=file.thumbnail_url_medium_noncustom,
                        source_link=url,
                        site_name=self.name.value,
                    )
                )

        return posts or None
