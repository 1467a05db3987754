"""Prompt templates for the video summary.

``build_prompt`` assembles, in order:

1. VIDEO_CONTEXT: details, description excerpt, tags, transcript excerpt.
2. ANALYSIS_REQUEST: the fixed emoji-headed section layout.
3. SPECIAL_INSTRUCTIONS: only when the caller supplied extra text.
4. The model family's formatting instructions.
"""

from __future__ import annotations

from ..formatting import format_count, format_duration, format_published_date
from ..models.youtube import VideoMetadata

DESCRIPTION_LIMIT = 1000
TAG_LIMIT = 10
TRANSCRIPT_LIMIT = 6000

VIDEO_CONTEXT = """\
Please analyze this YouTube video using the following information:

**📺 VIDEO DETAILS:**
- Title: {title}
- Channel: {channel}
- Duration: {duration}
- Views: {views}
- Published: {published}
- Likes: {likes}

**📄 DESCRIPTION:**
{description}

{tags}

{transcript}

"""

TAGS_BLOCK = "**🏷️ TAGS:** {tags}"

TRANSCRIPT_BLOCK = "**📝 VIDEO TRANSCRIPT:**\n{transcript}"

NO_TRANSCRIPT = "**📝 TRANSCRIPT:** Not available (video may not have captions)"

ANALYSIS_REQUEST = """\
**🎯 ANALYSIS REQUEST:**
Based on the above information, please provide a comprehensive analysis with the following structure:

🎬 **Video Overview**
What is this video about? What's the main topic?

🎯 **Purpose & Goals**
What is the creator trying to achieve or teach?

🔑 **Key Points & Takeaways**
List the most important points discussed (based on transcript if available)

💡 **Main Insights & Lessons**
What are the key insights viewers will gain?

👥 **Target Audience**
Who would benefit most from watching this video?

📚 **Content Type & Style**
Educational, entertainment, tutorial, review, etc.

⭐ **Value Proposition**
What specific value does this video provide?

📋 **Summary**
Provide a comprehensive summary of the content

IMPORTANT: Use the emoji headers exactly as shown above \
(🎬 **Video Overview**, not "Video Overview" followed by "🎬 Video Overview"). \
Do not repeat section titles."""

SPECIAL_INSTRUCTIONS = "\n\n**🎨 SPECIAL INSTRUCTIONS:** {instructions}"

FORMATTING_INSTRUCTIONS = "\n\n**FORMATTING INSTRUCTIONS:** {instructions}"

NEWER_FAMILY_FORMATTING = (
    "Please structure your response with clear emoji headers (🎬, 🎯, 🔑, etc.) "
    "and use bullet points with * for lists. Use **bold** for emphasis."
)

DEFAULT_FAMILY_FORMATTING = (
    "Please use the emoji section headers exactly as specified above. "
    "Do NOT write plain text headers before emoji headers. "
    "Start each section directly with the emoji "
    "(e.g., '🎬 **Video Overview**' not 'Video Overview' followed by '🎬 Video Overview')."
)


def _excerpt(text: str, limit: int, marker: str) -> str:
    return text[:limit] + (marker if len(text) > limit else "")


def build_prompt(
    metadata: VideoMetadata,
    transcript: str | None,
    additional_prompt: str | None = None,
    *,
    formatting_instructions: str | None = None,
) -> str:
    """Compose the full analysis prompt for one video.

    Args:
        metadata: Real or placeholder metadata.
        transcript: Concatenated caption text, or None when unavailable.
        additional_prompt: Caller's extra instructions; ignored when blank.
        formatting_instructions: Model-family formatting directive, appended last.

    Returns:
        The prompt text.
    """
    description = (
        _excerpt(metadata.description, DESCRIPTION_LIMIT, "...")
        if metadata.description
        else "No description available"
    )
    tags = TAGS_BLOCK.format(tags=", ".join(metadata.tags[:TAG_LIMIT])) if metadata.tags else ""
    transcript_section = (
        TRANSCRIPT_BLOCK.format(
            transcript=_excerpt(transcript, TRANSCRIPT_LIMIT, "...(transcript continues)")
        )
        if transcript
        else NO_TRANSCRIPT
    )

    prompt = VIDEO_CONTEXT.format(
        title=metadata.title,
        channel=metadata.channel_title,
        duration=format_duration(metadata.duration),
        views=format_count(metadata.view_count),
        published=format_published_date(metadata.published_at),
        likes=format_count(metadata.like_count),
        description=description,
        tags=tags,
        transcript=transcript_section,
    ) + ANALYSIS_REQUEST

    if additional_prompt and additional_prompt.strip():
        prompt += SPECIAL_INSTRUCTIONS.format(instructions=additional_prompt)
    if formatting_instructions:
        prompt += FORMATTING_INSTRUCTIONS.format(instructions=formatting_instructions)
    return prompt
