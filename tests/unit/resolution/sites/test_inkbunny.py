"""Tests for Inkbunny resolver."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import parse_qs

import pytest
import respx
from httpx import Response

from foxsource.core.exceptions import (
    FatalConfigurationError,
    ResolutionError,
    SessionExpiredError,
)
from foxsource.core.types import SiteName
from foxsource.resolution.sites.inkbunny import InkbunnyResolver

SUBMISSION_URL = "https://inkbunny.net/s/1234567"
LOGIN_URL = "https://inkbunny.net/api_login.php"
SUBMISSIONS_URL = "https://inkbunny.net/api_submissions.php"


@pytest.fixture
def resolver() -> InkbunnyResolver:
    """Create an Inkbunny resolver."""
    return InkbunnyResolver("test-user", "test-password")


def login_response(sid: str = "sid-1", ratingsmask: str = "11111") -> Response:
    return Response(200, json={"sid": sid, "user_id": 77, "ratingsmask": ratingsmask})


def error_response(code: int) -> Response:
    return Response(200, json={"error_code": code, "error_message": "error"})


@pytest.fixture
def submissions_data() -> dict[str, Any]:
    """Sample submissions response with two files."""
    return {
        "sid": "sid-1",
        "results_count": 1,
        "submissions": [
            {
                "submission_id": "1234567",
                "files": [
                    {
                        "file_id": "1",
                        "file_name": "page1.png",
                        "thumbnail_url_medium_noncustom": "https://tx.ib.metapix.net/thumb1.jpg",
                        "file_url_screen": "https://tx.ib.metapix.net/screen/page1.png",
                    },
                    {
                        "file_id": "2",
                        "file_name": "page2.jpg",
                        "thumbnail_url_medium_noncustom": "https://tx.ib.metapix.net/thumb2.jpg",
                        "file_url_screen": "https://tx.ib.metapix.net/screen/page2.jpg",
                    },
                ],
            }
        ],
    }


def sent_form(route: respx.Route, index: int) -> dict[str, list[str]]:
    return parse_qs(route.calls[index].request.content.decode())


# ============================================================================
# URL Matching Tests
# ============================================================================


class TestInkbunnySupports:
    """Tests for Inkbunny URL recognition."""

    def test_site_name(self, resolver: InkbunnyResolver):
        assert resolver.name == SiteName.INKBUNNY

    async def test_supported(self, resolver: InkbunnyResolver):
        assert await resolver.supports(SUBMISSION_URL) is True

    async def test_unsupported(self, resolver: InkbunnyResolver):
        assert await resolver.supports("https://inkbunny.net/foxartist") is False


# ============================================================================
# Fetch Tests
# ============================================================================


class TestInkbunnyFetch:
    """Tests for fetching submissions."""

    @respx.mock
    async def test_logs_in_and_fetches(
        self,
        resolver: InkbunnyResolver,
        submissions_data: dict[str, Any],
    ):
        login = respx.post(LOGIN_URL).mock(return_value=login_response())
        submissions = respx.post(SUBMISSIONS_URL).mock(
            return_value=Response(200, json=submissions_data)
        )

        records = await resolver.fetch(1, SUBMISSION_URL)

        assert login.call_count == 1
        assert sent_form(login, 0) == {"username": ["test-user"], "password": ["test-password"]}
        assert sent_form(submissions, 0) == {"sid": ["sid-1"], "submission_ids": ["1234567"]}

        assert len(records) == 2
        assert [r.file_type for r in records] == ["png", "jpg"]
        assert records[0].url == "https://tx.ib.metapix.net/screen/page1.png"
        assert records[0].thumb == "https://tx.ib.metapix.net/thumb1.jpg"
        assert all(r.source_link == SUBMISSION_URL for r in records)
        assert all(r.site_name == "Inkbunny" for r in records)

    @respx.mock
    async def test_session_is_reused(
        self,
        resolver: InkbunnyResolver,
        submissions_data: dict[str, Any],
    ):
        login = respx.post(LOGIN_URL).mock(return_value=login_response())
        respx.post(SUBMISSIONS_URL).mock(return_value=Response(200, json=submissions_data))

        await resolver.fetch(1, SUBMISSION_URL)
        await resolver.fetch(2, SUBMISSION_URL)

        assert login.call_count == 1
        assert resolver.has_session

    @respx.mock
    async def test_submission_without_files(
        self,
        resolver: InkbunnyResolver,
        submissions_data: dict[str, Any],
    ):
        submissions_data["submissions"][0]["files"] = []
        respx.post(LOGIN_URL).mock(return_value=login_response())
        respx.post(SUBMISSIONS_URL).mock(return_value=Response(200, json=submissions_data))

        assert await resolver.fetch(1, SUBMISSION_URL) is None


# ============================================================================
# Session Renewal Tests
# ============================================================================


class TestInkbunnySession:
    """Tests for session expiry and API errors."""

    @respx.mock
    async def test_expired_session_renews_once(
        self,
        resolver: InkbunnyResolver,
        submissions_data: dict[str, Any],
    ):
        login = respx.post(LOGIN_URL).mock(
            side_effect=[login_response("sid-1"), login_response("sid-2")]
        )
        submissions = respx.post(SUBMISSIONS_URL).mock(
            side_effect=[error_response(2), Response(200, json=submissions_data)]
        )

        records = await resolver.fetch(1, SUBMISSION_URL)

        assert len(records) == 2
        assert login.call_count == 2
        assert submissions.call_count == 2
        assert sent_form(submissions, 0)["sid"] == ["sid-1"]
        assert sent_form(submissions, 1)["sid"] == ["sid-2"]

    @respx.mock
    async def test_repeated_expiry_is_bounded(self, resolver: InkbunnyResolver):
        login = respx.post(LOGIN_URL).mock(return_value=login_response())
        submissions = respx.post(SUBMISSIONS_URL).mock(return_value=error_response(2))

        with pytest.raises(SessionExpiredError):
            await resolver.fetch(1, SUBMISSION_URL)

        assert login.call_count == 2
        assert submissions.call_count == 2
        assert not resolver.has_session

    @respx.mock
    async def test_other_error_aborts_without_retry(self, resolver: InkbunnyResolver):
        login = respx.post(LOGIN_URL).mock(return_value=login_response())
        submissions = respx.post(SUBMISSIONS_URL).mock(return_value=error_response(5))

        with pytest.raises(ResolutionError) as exc_info:
            await resolver.fetch(1, SUBMISSION_URL)

        assert not isinstance(exc_info.value, SessionExpiredError)
        assert exc_info.value.details["error_code"] == 5
        assert login.call_count == 1
        assert submissions.call_count == 1


# ============================================================================
# Fatal Login Tests
# ============================================================================


class TestInkbunnyLogin:
    """Tests for login failures that disable the resolver."""

    @respx.mock
    async def test_invalid_credentials_are_remembered(self, resolver: InkbunnyResolver):
        login = respx.post(LOGIN_URL).mock(return_value=error_response(0))

        with pytest.raises(FatalConfigurationError):
            await resolver.fetch(1, SUBMISSION_URL)
        with pytest.raises(FatalConfigurationError):
            await resolver.fetch(1, SUBMISSION_URL)

        assert login.call_count == 1

    @respx.mock
    async def test_concurrent_calls_log_in_once(self, resolver: InkbunnyResolver, monkeypatch):
        login = respx.post(LOGIN_URL).mock(return_value=error_response(0))
        real_login = resolver._login

        async def slow_login() -> str:
            await asyncio.sleep(0.01)
            return await real_login()

        monkeypatch.setattr(resolver, "_login", slow_login)

        results = await asyncio.gather(
            *(resolver.fetch(1, SUBMISSION_URL) for _ in range(3)),
            return_exceptions=True,
        )

        assert all(isinstance(result, FatalConfigurationError) for result in results)
        assert login.call_count == 1

    @respx.mock
    async def test_restricted_ratings_are_fatal(self, resolver: InkbunnyResolver):
        respx.post(LOGIN_URL).mock(return_value=login_response(ratingsmask="11100"))
        submissions = respx.post(SUBMISSIONS_URL).mock(return_value=error_response(5))

        with pytest.raises(FatalConfigurationError) as exc_info:
            await resolver.fetch(1, SUBMISSION_URL)

        assert "viewing permissions" in str(exc_info.value)
        assert submissions.call_count == 0

    @respx.mock
    async def test_unknown_login_error_is_fatal(self, resolver: InkbunnyResolver):
        respx.post(LOGIN_URL).mock(return_value=error_response(9))

        with pytest.raises(FatalConfigurationError):
            await resolver.get_sid()
