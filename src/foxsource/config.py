"""Application configuration using Pydantic Settings."""

import logging
from functools import lru_cache

from pydantic import Field, RedisDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class FoxSourceSettings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="FOXSOURCE_",
    )

    # Redis (credential and chat config stores)
    redis_url: RedisDsn | None = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL (optional)",
    )

    # Hash search
    fuzzysearch_api_key: str | None = Field(
        default=None,
        description="FuzzySearch API key (required for reverse image lookups)",
    )
    fuzzysearch_endpoint: str = Field(
        default="https://api.fuzzysearch.net",
        description="FuzzySearch API base URL",
    )

    # Twitter
    twitter_consumer_key: str | None = Field(
        default=None,
        description="Twitter app consumer key",
    )
    twitter_consumer_secret: str | None = Field(
        default=None,
        description="Twitter app consumer secret",
    )

    # FurAffinity
    fa_cookie_a: str | None = Field(
        default=None,
        description="FurAffinity 'a' session cookie",
    )
    fa_cookie_b: str | None = Field(
        default=None,
        description="FurAffinity 'b' session cookie",
    )

    # Weasyl
    weasyl_api_key: str | None = Field(
        default=None,
        description="Weasyl API key",
    )

    # Inkbunny
    inkbunny_username: str | None = Field(
        default=None,
        description="Inkbunny account username",
    )
    inkbunny_password: str | None = Field(
        default=None,
        description="Inkbunny account password",
    )

    # App settings
    user_agent_contact: str = Field(
        default="https://github.com/foxsource/foxsource",
        description="Contact URL sent in the User-Agent header",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def has_twitter(self) -> bool:
        return bool(self.twitter_consumer_key and self.twitter_consumer_secret)

    @property
    def has_furaffinity(self) -> bool:
        return bool(self.fa_cookie_a and self.fa_cookie_b)

    @property
    def has_inkbunny(self) -> bool:
        return bool(self.inkbunny_username and self.inkbunny_password)


@lru_cache
def get_settings() -> FoxSourceSettings:
    """Get cached settings instance."""
    return FoxSourceSettings()


def configure_logging(settings: FoxSourceSettings) -> None:
    """Apply the configured log level to the root logger."""
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
