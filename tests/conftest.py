"""Shared test fixtures for youtube-summarizer."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from youtube_summarizer.config import ServerConfig
from youtube_summarizer.models.youtube import VideoMetadata

VIDEO_ID = "dQw4w9WgXcQ"
VIDEO_URL = f"https://youtube.com/watch?v={VIDEO_ID}"


@pytest.fixture(autouse=True, scope="session")
def _unwrap_fastmcp_tools():
    """Make tool functions directly awaitable in tests.

    FastMCP 2.x replaces an ``@server.tool`` function with a FunctionTool
    holding it in ``.fn``; 3.x keeps the function itself.
    """
    import youtube_summarizer.tools.summarize as mod

    for name in list(vars(mod)):
        obj = getattr(mod, name, None)
        if obj is not None and hasattr(obj, "fn") and not callable(obj):
            setattr(mod, name, obj.fn)


@pytest.fixture(autouse=True)
def _set_dummy_api_keys(monkeypatch):
    """Ensure tests never hit real Gemini or YouTube APIs."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key-not-real")
    monkeypatch.setenv("YOUTUBE_API_KEY", "yt-key-not-real")


@pytest.fixture(autouse=True)
def _disable_tracing(monkeypatch):
    """Keep MLflow out of unit tests even when it is installed."""
    monkeypatch.setenv("GEMINI_TRACING_ENABLED", "false")


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/youtube-summarizer/.env."""
    monkeypatch.setattr(
        "youtube_summarizer.dotenv.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture(autouse=True)
def clean_config():
    """Reset the config singleton around every test."""
    import youtube_summarizer.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture(autouse=True)
def _reset_client_pools():
    from youtube_summarizer.client import GeminiClient
    from youtube_summarizer.youtube import YouTubeClient

    GeminiClient._clients.clear()
    YouTubeClient.reset()
    yield
    GeminiClient._clients.clear()
    YouTubeClient.reset()


@pytest.fixture()
def config() -> ServerConfig:
    return ServerConfig(gemini_api_key="test-key-not-real", youtube_api_key="yt-key-not-real")


@pytest.fixture()
def sample_metadata() -> VideoMetadata:
    return VideoMetadata(
        title="Rick Astley - Never Gonna Give You Up",
        description="The official video for Never Gonna Give You Up",
        channel_title="Rick Astley",
        published_at="2009-10-25T06:57:33Z",
        tags=["rick astley", "never gonna give you up"],
        category_id="10",
        view_count=1500000000,
        like_count=16000000,
        comment_count=3000000,
        duration="PT3M33S",
    )


@pytest.fixture()
def mock_gemini_client():
    """Patch GeminiClient.analyze for orchestration and adapter tests."""
    with patch(
        "youtube_summarizer.client.GeminiClient.analyze", new_callable=AsyncMock
    ) as mock_analyze:
        mock_analyze.return_value = "🎬 **Video Overview**\nA classic music video."
        yield mock_analyze


@pytest.fixture()
def mock_fetchers(sample_metadata):
    """Patch both source fetchers with successful results."""
    with (
        patch(
            "youtube_summarizer.youtube.YouTubeClient.video_metadata", new_callable=AsyncMock
        ) as mock_meta,
        patch(
            "youtube_summarizer.summarize.fetch_transcript", new_callable=AsyncMock
        ) as mock_transcript,
    ):
        mock_meta.return_value = sample_metadata
        mock_transcript.return_value = "We're no strangers to love you know the rules"
        yield {"metadata": mock_meta, "transcript": mock_transcript}
