"""Request and response schemas for the summarize endpoint.

``AnalysisRequest`` mirrors the inbound JSON body; ``AnalysisResult`` is the
200 response body shared by the server, function, and MCP adapters.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class AnalysisRequest(BaseModel):
    """Inbound summarize request. ``youtube_link`` is checked by the orchestrator."""

    model_config = ConfigDict(extra="ignore")

    youtube_link: str | None = None
    model: str | None = Field(default=None, description="Gemini model id; config default when omitted")
    additional_prompt: str | None = Field(default=None, description="Free-text extra instructions")


class MetadataExcerpt(BaseModel):
    title: str = ""
    channel: str = ""
    duration: str = "Unknown"
    views: int | None = None
    likes: int | None = None
    published: str | None = None


class AnalysisQuality(BaseModel):
    """How much source material the analysis was built from."""

    has_metadata: bool
    has_transcript: bool
    transcript_length: int = 0
    content_richness: Literal["High", "Medium"]


class AnalysisResult(BaseModel):
    success: bool = True
    summary: str
    model_used: str
    video_url: str
    video_id: str
    video_metadata: MetadataExcerpt
    analysis_quality: AnalysisQuality
    timestamp: str
