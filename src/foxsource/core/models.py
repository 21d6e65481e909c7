"""Domain models shared by every resolver and handler."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .types import SiteName


class PostInfo(BaseModel):
    """Normalized metadata for one media item of a post."""

    file_type: str = Field(..., description="Lowercase file extension (png, jpg, ...)")
    url: str = Field(..., description="URL to the full image or video")
    personal: bool = Field(default=False, description="Whether the source is non-public")
    thumb: str | None = Field(default=None, description="URL to a thumbnail")
    source_link: str | None = Field(default=None, description="URL of the original post")
    extra_caption: str | None = Field(default=None, description="Caption of the original post")
    title: str | None = Field(default=None, description="Display name, usually the author")
    site_name: str = Field(..., description="Human readable name of the site")


class LinkedCredential(BaseModel):
    """An OAuth key/secret pair stored for a user."""

    model_config = ConfigDict(frozen=True)

    key: str
    secret: str


class File(BaseModel):
    """A single hit returned by the hash-search service."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    site_id: int
    site_id_str: str | None = None
    url: str = Field(..., description="Direct URL to the matched file")
    filename: str
    artists: list[str] | None = None
    rating: str | None = None
    site: str = Field(..., description="FurAffinity, e621 or Twitter")
    hash: int | None = None
    distance: int | None = Field(default=None, description="Hamming distance to the query")

    @property
    def site_name(self) -> str:
        """Human readable name of the site the match came from."""
        match self.site.lower():
            case "furaffinity":
                return SiteName.FURAFFINITY.value
            case "e621":
                return SiteName.E621.value
            case "twitter":
                return SiteName.TWITTER.value
            case _:
                return self.site

    def source_url(self) -> str:
        """Canonical link to the post containing this file."""
        match self.site.lower():
            case "furaffinity":
                return f"https://www.furaffinity.net/view/{self.site_id}/"
            case "e621":
                return f"https://e621.net/post/show/{self.site_id}"
            case "twitter":
                artist = self.artists[0] if self.artists else "i/web"
                return f"https://twitter.com/{artist}/status/{self.site_id}"
            case _:
                return self.url
