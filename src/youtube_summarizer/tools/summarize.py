"""Summarize tool on a FastMCP sub-server."""

from __future__ import annotations

import logging

from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..config import get_config
from ..errors import make_tool_error
from ..models.summary import AnalysisRequest
from ..summarize import summarize_video
from ..tracing import trace
from ..types import AdditionalPrompt, ModelName, YouTubeUrl

logger = logging.getLogger(__name__)
summarize_server = FastMCP("summarize")


@summarize_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
    )
)
@trace(name="video_summarize", span_type="TOOL")
async def video_summarize(
    url: YouTubeUrl,
    model: ModelName = None,
    additional_prompt: AdditionalPrompt = None,
) -> dict:
    """Summarize a YouTube video from its metadata and captions.

    Fetches YouTube Data API metadata and the caption transcript, then asks
    Gemini for a sectioned analysis (overview, purpose, key points, insights,
    audience, content type, value, summary). Works without captions or
    metadata at reduced quality; see ``analysis_quality`` in the result.

    Args:
        url: YouTube video URL.
        model: Gemini model id override.
        additional_prompt: Extra instructions for the analysis.

    Returns:
        Dict matching AnalysisResult, or a tool error via make_tool_error().
    """
    request = AnalysisRequest(youtube_link=url, model=model, additional_prompt=additional_prompt)
    try:
        result = await summarize_video(request, get_config())
    except Exception as exc:
        logger.warning("video_summarize failed for %s: %s", url, exc)
        return make_tool_error(exc)
    return result.model_dump(mode="json")
