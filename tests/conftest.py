"""Shared test fixtures for all tests."""

from __future__ import annotations

import pytest

from foxsource.config import FoxSourceSettings
from foxsource.core.messages import ChatMessage, ChatUser, PhotoSize
from foxsource.core.models import File, LinkedCredential, PostInfo
from foxsource.core.types import SiteName

# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def sample_post() -> PostInfo:
    """Create a fully populated post record."""
    return PostInfo(
        file_type="png",
        url="https://static1.e621.net/data/ab/cd/abcd1234.png",
        personal=False,
        thumb="https://static1.e621.net/data/preview/ab/cd/abcd1234.jpg",
        source_link="https://e621.net/posts/12345",
        extra_caption=None,
        title=None,
        site_name=SiteName.E621.value,
    )


@pytest.fixture
def sample_file() -> File:
    """Create a hash-search hit from FurAffinity."""
    return File(
        id=1,
        site_id=44556677,
        url="https://d.furaffinity.net/art/artist/1600000000/1600000000.artist_image.png",
        filename="1600000000.artist_image.png",
        artists=["artist"],
        site="FurAffinity",
        hash=123456789,
        distance=0,
    )


@pytest.fixture
def make_file():
    """Factory fixture to build hash-search hits."""
    def _make(site: str, site_id: int, distance: int | None, artist: str = "artist") -> File:
        return File(
            id=site_id,
            site_id=site_id,
            url=f"https://files.example.com/{site_id}.png",
            filename=f"{site_id}.png",
            artists=[artist],
            site=site,
            distance=distance,
        )
    return _make


@pytest.fixture
def sample_credential() -> LinkedCredential:
    """Create a linked OAuth credential."""
    return LinkedCredential(key="user-token", secret="user-secret")


@pytest.fixture
def sample_user() -> ChatUser:
    """Create a chat user."""
    return ChatUser(id=42, username="fox", language_code="en-US")


@pytest.fixture
def photo_message(sample_user: ChatUser) -> ChatMessage:
    """Create a group message with a photo in several sizes."""
    return ChatMessage(
        message_id=100,
        chat_id=-1001,
        from_user=sample_user,
        photo=[
            PhotoSize(file_id="small", width=90, height=60, file_size=1_000),
            PhotoSize(file_id="large", width=1280, height=853, file_size=120_000),
            PhotoSize(file_id="medium", width=320, height=213, file_size=10_000),
        ],
    )


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def mock_settings() -> FoxSourceSettings:
    """Create mock settings for testing."""
    return FoxSourceSettings(
        redis_url="redis://localhost:6379/15",  # Use DB 15 for tests
        fuzzysearch_api_key="test-fuzzysearch-key",
        twitter_consumer_key="test-consumer-key",
        twitter_consumer_secret="test-consumer-secret",
        fa_cookie_a="test-cookie-a",
        fa_cookie_b="test-cookie-b",
        weasyl_api_key="test-weasyl-key",
        inkbunny_username="test-user",
        inkbunny_password="test-password",
        debug=True,
        log_level="DEBUG",
    )


@pytest.fixture
def mock_settings_minimal() -> FoxSourceSettings:
    """Create minimal settings without optional services."""
    return FoxSourceSettings(
        _env_file=None,
        redis_url=None,
        fuzzysearch_api_key=None,
        twitter_consumer_key=None,
        twitter_consumer_secret=None,
        fa_cookie_a=None,
        fa_cookie_b=None,
        weasyl_api_key=None,
        inkbunny_username=None,
        inkbunny_password=None,
    )
