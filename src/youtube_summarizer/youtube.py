"""YouTube Data API v3 client for video metadata.

Thin async wrapper around google-api-python-client (sync), run in
``asyncio.to_thread()``. Single attempt; the caller decides what a
failure means.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .config import ServerConfig
from .errors import ApiKeyMissingError, UpstreamFetchError, VideoNotFoundError
from .models.youtube import VideoMetadata

logger = logging.getLogger(__name__)

METADATA_PARTS = "snippet,statistics,contentDetails"


def _to_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def metadata_from_item(item: dict) -> VideoMetadata:
    """Map one ``videos().list()`` item to VideoMetadata."""
    snippet = item.get("snippet", {})
    stats = item.get("statistics", {})
    details = item.get("contentDetails", {})
    return VideoMetadata(
        title=snippet.get("title", ""),
        description=snippet.get("description") or "",
        channel_title=snippet.get("channelTitle", ""),
        published_at=snippet.get("publishedAt"),
        tags=snippet.get("tags") or [],
        category_id=snippet.get("categoryId"),
        view_count=_to_int(stats.get("viewCount")),
        like_count=_to_int(stats.get("likeCount")),
        comment_count=_to_int(stats.get("commentCount")),
        duration=details.get("duration"),
        thumbnails=snippet.get("thumbnails") or {},
    )


class YouTubeClient:
    """Process-wide YouTube API service pool (one service per API key)."""

    _services: dict[str, Any] = {}

    @classmethod
    def get(cls, api_key: str):
        """Return (or build) the API service for *api_key*."""
        if api_key not in cls._services:
            from googleapiclient.discovery import build

            cls._services[api_key] = build(
                "youtube", "v3", developerKey=api_key, cache_discovery=False,
            )
            logger.info("Created YouTube API service (key …%s)", api_key[-4:])
        return cls._services[api_key]

    @classmethod
    def reset(cls) -> None:
        """Drop cached services (for testing)."""
        cls._services.clear()

    @classmethod
    async def video_metadata(cls, video_id: str, config: ServerConfig) -> VideoMetadata:
        """Fetch title, description, stats, duration and tags for *video_id*.

        Args:
            video_id: 11-character YouTube video ID.
            config: Supplies ``youtube_api_key``.

        Returns:
            VideoMetadata built from the first matching item.

        Raises:
            UpstreamFetchError: Key not configured, video not found, or any
                transport/HTTP failure.
        """
        try:
            if not config.youtube_api_key:
                raise ApiKeyMissingError("YouTube API key not configured")

            def _fetch() -> dict:
                svc = cls.get(config.youtube_api_key)
                return svc.videos().list(part=METADATA_PARTS, id=video_id).execute()

            resp = await asyncio.to_thread(_fetch)
            items = resp.get("items") or []
            if not items:
                raise VideoNotFoundError("Video not found")
            return metadata_from_item(items[0])
        except Exception as exc:
            logger.error("YouTube API error for %s: %s", video_id, exc)
            raise UpstreamFetchError(f"Failed to fetch video metadata: {exc}") from exc
