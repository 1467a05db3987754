"""Caption transcript retrieval via youtube-transcript-api."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from youtube_transcript_api import NoTranscriptFound, YouTubeTranscriptApi

logger = logging.getLogger(__name__)


def _fetch_text(video_id: str, languages: Sequence[str]) -> str:
    """Fetch the preferred-language captions, else the video's first caption track."""
    api = YouTubeTranscriptApi()
    try:
        fetched = api.fetch(video_id, languages=list(languages))
    except NoTranscriptFound:
        track = next(iter(api.list(video_id)), None)
        if track is None:
            return ""
        logger.info(
            "No %s captions for %s, using %s track",
            "/".join(languages),
            video_id,
            track.language_code,
        )
        fetched = track.fetch()
    return " ".join(snippet.text for snippet in fetched.snippets)


async def fetch_transcript(video_id: str, languages: Sequence[str] = ("en",)) -> str | None:
    """Return the video's captions as one space-joined string, or None.

    Tracks in *languages* are preferred; any other caption track is used
    when none of them exists. Missing captions are an expected outcome, so
    every failure (captions disabled, no tracks at all, network errors) is
    logged and reported as None instead of raised.
    """
    try:
        text = await asyncio.to_thread(_fetch_text, video_id, languages)
    except Exception as exc:
        logger.warning("Transcript unavailable for %s: %s", video_id, exc)
        return None
    return text or None
