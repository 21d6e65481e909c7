"""Tests for settings."""

from __future__ import annotations

from foxsource.config import FoxSourceSettings


class TestSettings:
    """Tests for loading settings from the environment."""

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("FOXSOURCE_WEASYL_API_KEY", "from-env")
        monkeypatch.setenv("FOXSOURCE_INKBUNNY_USERNAME", "fox")
        monkeypatch.setenv("FOXSOURCE_INKBUNNY_PASSWORD", "secret")

        settings = FoxSourceSettings(_env_file=None)

        assert settings.weasyl_api_key == "from-env"
        assert settings.has_inkbunny

    def test_provider_flags_need_both_values(self):
        settings = FoxSourceSettings(
            _env_file=None,
            twitter_consumer_key="key",
            twitter_consumer_secret=None,
            fa_cookie_a="a",
            fa_cookie_b=None,
        )

        assert not settings.has_twitter
        assert not settings.has_furaffinity

    def test_full_settings(self, mock_settings: FoxSourceSettings):
        assert mock_settings.has_twitter
        assert mock_settings.has_furaffinity
        assert mock_settings.has_inkbunny
