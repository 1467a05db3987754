"""Shared type aliases for tool parameters."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

YouTubeUrl = Annotated[str, Field(min_length=10, description="YouTube video URL (youtube.com or youtu.be)")]
ModelName = Annotated[str | None, Field(
    description="Gemini model id, e.g. gemini-1.5-flash or gemini-2.0-flash (server default when omitted)",
)]
AdditionalPrompt = Annotated[str | None, Field(
    max_length=4000,
    description="Extra instructions appended to the analysis prompt",
)]
