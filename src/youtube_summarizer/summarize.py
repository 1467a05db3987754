"""Summarize pipeline shared by every entry point.

validate link → extract ID → fetch metadata + transcript concurrently →
compose prompt → generate → build AnalysisResult.

The two fetches are settled independently: each failure is logged and
replaced by its fallback, and neither can cancel the other.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Generic, TypeVar

from .client import GeminiClient
from .config import ServerConfig
from .errors import InvalidRequestError, MissingInputError
from .formatting import format_duration, iso_timestamp
from .models.summary import AnalysisQuality, AnalysisRequest, AnalysisResult, MetadataExcerpt
from .models.youtube import VideoMetadata
from .prompts.summary import build_prompt
from .tracing import annotate_span, trace
from .transcript import fetch_transcript
from .urls import extract_video_id
from .youtube import YouTubeClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[T]):
    """Outcome of a fallback-protected fetch; ``ok`` is False when *value* is the fallback."""

    value: T
    ok: bool


async def settle(awaitable: Awaitable[T], fallback: T, *, label: str) -> Settled[T]:
    """Await *awaitable*, substituting *fallback* if it raises."""
    try:
        return Settled(await awaitable, True)
    except Exception as exc:
        logger.error("%s fetch failed: %s", label, exc)
        return Settled(fallback, False)


async def fetch_video_sources(
    video_id: str, config: ServerConfig
) -> tuple[Settled[VideoMetadata], Settled[str | None]]:
    """Fetch metadata and transcript concurrently, never failing fast."""
    metadata, transcript = await asyncio.gather(
        settle(
            YouTubeClient.video_metadata(video_id, config),
            VideoMetadata.placeholder(),
            label="Metadata",
        ),
        settle(
            fetch_transcript(video_id, config.transcript_languages),
            None,
            label="Transcript",
        ),
    )
    return metadata, transcript


def _quality(metadata_ok: bool, transcript: str | None) -> AnalysisQuality:
    return AnalysisQuality(
        has_metadata=metadata_ok,
        has_transcript=bool(transcript),
        transcript_length=len(transcript) if transcript else 0,
        content_richness="High" if transcript else "Medium",
    )


def _excerpt(metadata: VideoMetadata) -> MetadataExcerpt:
    return MetadataExcerpt(
        title=metadata.title,
        channel=metadata.channel_title,
        duration=format_duration(metadata.duration),
        views=metadata.view_count,
        likes=metadata.like_count,
        published=metadata.published_at,
    )


@trace(name="summarize_video", span_type="CHAIN")
async def summarize_video(request: AnalysisRequest, config: ServerConfig) -> AnalysisResult:
    """Run the full summarize pipeline for one request.

    Args:
        request: Inbound request body.
        config: Process-wide configuration.

    Returns:
        AnalysisResult for a 200 response.

    Raises:
        InvalidRequestError: Link missing or not a recognisable YouTube URL.
        GenerationError: The Gemini call failed.
    """
    link = request.youtube_link or ""
    if not link.strip():
        raise MissingInputError("YouTube link is required")

    video_id = extract_video_id(link)
    if not video_id:
        raise InvalidRequestError("Invalid YouTube URL")

    logger.info("Processing video ID: %s", video_id)
    metadata, transcript = await fetch_video_sources(video_id, config)
    logger.info("Video title: %s", metadata.value.title)
    logger.info("Transcript available: %s", bool(transcript.value))

    model_name = request.model or config.default_model
    family = config.resolve_family(model_name)
    annotate_span(video_id=video_id, model_used=model_name, model_family=family.name)
    prompt = build_prompt(
        metadata.value,
        transcript.value,
        request.additional_prompt,
        formatting_instructions=family.formatting_instructions,
    )

    logger.info("Generating analysis with model: %s (%s family)", model_name, family.name)
    summary = await GeminiClient.analyze(
        prompt,
        model=model_name,
        family=family,
        api_key=config.gemini_api_key,
    )
    logger.info("Analysis generated for %s (%d chars)", video_id, len(summary))

    return AnalysisResult(
        success=True,
        summary=summary,
        model_used=model_name,
        video_url=link,
        video_id=video_id,
        video_metadata=_excerpt(metadata.value),
        analysis_quality=_quality(metadata.ok, transcript.value),
        timestamp=iso_timestamp(),
    )
