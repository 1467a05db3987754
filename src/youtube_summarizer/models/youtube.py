"""YouTube Data API models.

Populated from ``videos().list()`` responses, not from Gemini. Every field
is defaultable because the API omits fields freely (tags on untagged
videos, like counts when ratings are hidden).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

PLACEHOLDER_TITLE = "Title unavailable"


class VideoMetadata(BaseModel):
    """Descriptive and statistical data for one video."""

    title: str = ""
    description: str = ""
    channel_title: str = ""
    published_at: str | None = None
    tags: list[str] = Field(default_factory=list)
    category_id: str | None = None
    view_count: int | None = None
    like_count: int | None = None
    comment_count: int | None = None
    duration: str | None = Field(default=None, description="ISO 8601 duration, e.g. PT4M13S")
    thumbnails: dict = Field(default_factory=dict)

    @classmethod
    def placeholder(cls) -> VideoMetadata:
        """Degraded record used when the metadata fetch fails."""
        return cls(
            title=PLACEHOLDER_TITLE,
            description="Metadata unavailable",
            channel_title="Unknown",
        )
