"""Tests for the shared summarize pipeline."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from youtube_summarizer.errors import (
    GenerationError,
    InvalidRequestError,
    MissingInputError,
    UpstreamFetchError,
)
from youtube_summarizer.models.summary import AnalysisRequest
from youtube_summarizer.summarize import Settled, fetch_video_sources, settle, summarize_video

VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://youtube.com/watch?v={VIDEO_ID}"


class TestSettle:
    @pytest.mark.asyncio
    async def test_success(self):
        async def ok():
            return 42

        assert await settle(ok(), 0, label="x") == Settled(42, True)

    @pytest.mark.asyncio
    async def test_failure_uses_fallback(self, caplog):
        async def boom():
            raise UpstreamFetchError("Video not found")

        with caplog.at_level("ERROR", logger="youtube_summarizer.summarize"):
            result = await settle(boom(), "fallback", label="Metadata")

        assert result == Settled("fallback", False)
        assert "Metadata fetch failed: Video not found" in caplog.text


class TestFetchVideoSources:
    @pytest.mark.asyncio
    async def test_both_succeed(self, config, mock_fetchers, sample_metadata):
        metadata, transcript = await fetch_video_sources(VIDEO_ID, config)
        assert metadata == Settled(sample_metadata, True)
        assert transcript.value.startswith("We're no strangers")
        mock_fetchers["transcript"].assert_awaited_once_with(VIDEO_ID, ("en",))

    @pytest.mark.asyncio
    async def test_metadata_failure_does_not_cancel_transcript(self, config, mock_fetchers):
        transcript_done = asyncio.Event()

        async def slow_transcript(*_args):
            await asyncio.sleep(0.01)
            transcript_done.set()
            return "late captions"

        mock_fetchers["metadata"].side_effect = UpstreamFetchError("Video not found")
        mock_fetchers["transcript"].side_effect = slow_transcript

        metadata, transcript = await fetch_video_sources(VIDEO_ID, config)

        assert metadata.ok is False
        assert metadata.value.title == "Title unavailable"
        assert transcript == Settled("late captions", True)
        assert transcript_done.is_set()

    @pytest.mark.asyncio
    async def test_transcript_failure_falls_back_to_none(self, config, mock_fetchers):
        mock_fetchers["transcript"].side_effect = RuntimeError("unexpected")
        _, transcript = await fetch_video_sources(VIDEO_ID, config)
        assert transcript == Settled(None, False)


class TestSummarizeVideo:
    @pytest.mark.asyncio
    async def test_full_result(self, config, mock_fetchers, mock_gemini_client):
        result = await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)

        assert result.success is True
        assert result.summary == "🎬 **Video Overview**\nA classic music video."
        assert result.model_used == "gemini-1.5-flash"
        assert result.video_id == VIDEO_ID
        assert result.video_url == VIDEO_URL
        assert result.video_metadata.title == "Rick Astley - Never Gonna Give You Up"
        assert result.video_metadata.channel == "Rick Astley"
        assert result.video_metadata.duration == "3m 33s"
        assert result.video_metadata.views == 1500000000
        assert result.video_metadata.likes == 16000000
        assert result.video_metadata.published == "2009-10-25T06:57:33Z"
        assert result.timestamp.endswith("Z")

    @pytest.mark.asyncio
    async def test_quality_with_transcript(self, config, mock_fetchers, mock_gemini_client):
        result = await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)
        quality = result.analysis_quality
        assert quality.has_metadata is True
        assert quality.has_transcript is True
        assert quality.transcript_length == len("We're no strangers to love you know the rules")
        assert quality.content_richness == "High"

    @pytest.mark.asyncio
    async def test_no_transcript(self, config, mock_fetchers, mock_gemini_client):
        mock_fetchers["transcript"].return_value = None

        result = await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)

        quality = result.analysis_quality
        assert quality.has_transcript is False
        assert quality.transcript_length == 0
        assert quality.content_richness == "Medium"
        prompt = mock_gemini_client.call_args.args[0]
        assert "**📝 TRANSCRIPT:** Not available" in prompt

    @pytest.mark.asyncio
    async def test_metadata_failure_uses_placeholder(self, config, mock_fetchers, mock_gemini_client):
        mock_fetchers["metadata"].side_effect = UpstreamFetchError("Video not found")

        result = await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)

        assert result.success is True
        assert result.analysis_quality.has_metadata is False
        assert result.video_metadata.title == "Title unavailable"
        assert result.video_metadata.channel == "Unknown"
        assert result.video_metadata.duration == "Unknown"
        assert result.video_metadata.views is None

    @pytest.mark.asyncio
    async def test_both_sources_fail_still_generates(self, config, mock_fetchers, mock_gemini_client):
        mock_fetchers["metadata"].side_effect = UpstreamFetchError("boom")
        mock_fetchers["transcript"].return_value = None

        result = await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)

        assert result.analysis_quality.has_metadata is False
        assert result.analysis_quality.has_transcript is False
        mock_gemini_client.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_explicit_model_selects_newer_family(self, config, mock_fetchers, mock_gemini_client):
        request = AnalysisRequest(youtube_link=VIDEO_URL, model="gemini-2.0-flash")

        result = await summarize_video(request, config)

        assert result.model_used == "gemini-2.0-flash"
        kwargs = mock_gemini_client.call_args.kwargs
        assert kwargs["model"] == "gemini-2.0-flash"
        assert kwargs["family"].name == "newer"
        assert kwargs["api_key"] == "test-key-not-real"

    @pytest.mark.asyncio
    async def test_default_model_uses_default_family(self, config, mock_fetchers, mock_gemini_client):
        await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)
        assert mock_gemini_client.call_args.kwargs["family"].name == "default"

    @pytest.mark.asyncio
    async def test_additional_prompt_reaches_model(self, config, mock_fetchers, mock_gemini_client):
        request = AnalysisRequest(youtube_link=VIDEO_URL, additional_prompt="Focus on the chorus")

        await summarize_video(request, config)

        prompt = mock_gemini_client.call_args.args[0]
        assert "**🎨 SPECIAL INSTRUCTIONS:** Focus on the chorus" in prompt

    @pytest.mark.asyncio
    async def test_short_link_echoed_unchanged(self, config, mock_fetchers, mock_gemini_client):
        link = f"  https://youtu.be/{VIDEO_ID}  "
        result = await summarize_video(AnalysisRequest(youtube_link=link), config)
        assert result.video_id == VIDEO_ID
        assert result.video_url == link

    @pytest.mark.asyncio
    async def test_span_annotated(self, config, mock_fetchers, mock_gemini_client):
        request = AnalysisRequest(youtube_link=VIDEO_URL, model="gemini-2.0-flash")
        with patch("youtube_summarizer.summarize.annotate_span") as mock_annotate:
            await summarize_video(request, config)

        mock_annotate.assert_called_once_with(
            video_id=VIDEO_ID, model_used="gemini-2.0-flash", model_family="newer"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("link", [None, "", "   "])
    async def test_missing_link(self, config, mock_fetchers, mock_gemini_client, link):
        with pytest.raises(MissingInputError, match="YouTube link is required"):
            await summarize_video(AnalysisRequest(youtube_link=link), config)
        mock_fetchers["metadata"].assert_not_called()
        mock_gemini_client.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_link(self, config, mock_fetchers, mock_gemini_client):
        with pytest.raises(InvalidRequestError, match="Invalid YouTube URL"):
            await summarize_video(AnalysisRequest(youtube_link="https://example.com/page"), config)
        mock_fetchers["transcript"].assert_not_called()
        mock_gemini_client.assert_not_called()

    @pytest.mark.asyncio
    async def test_generation_failure_propagates(self, config, mock_fetchers, mock_gemini_client):
        mock_gemini_client.side_effect = GenerationError("Failed to generate analysis: 500")
        with pytest.raises(GenerationError):
            await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)

    @pytest.mark.asyncio
    async def test_logs_progress(self, config, mock_fetchers, mock_gemini_client, caplog):
        with caplog.at_level("INFO", logger="youtube_summarizer.summarize"):
            await summarize_video(AnalysisRequest(youtube_link=VIDEO_URL), config)
        assert f"Processing video ID: {VIDEO_ID}" in caplog.text
        assert "Transcript available: True" in caplog.text


def test_settled_is_immutable():
    settled = Settled("v", True)
    with pytest.raises(AttributeError):
        settled.ok = False  # type: ignore[misc]
