"""Display helpers for prompt fields and post-processing of model output."""

from __future__ import annotations

import re
from datetime import datetime, timezone

UNKNOWN = "Unknown"

_DURATION_PATTERN = re.compile(r"PT(\d+H)?(\d+M)?(\d+S)?")

_QUAD_EMPHASIS = re.compile(r"\*\*\*\*")
_NUMBERED_ITEM = re.compile(r"^(\d+)\.(?!\d)[ \t]*", re.MULTILINE)
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_LABEL_LINE = re.compile(r"^(?!\*\*)(.+):$", re.MULTILINE)


def format_duration(duration: str | None) -> str:
    """Format an ISO 8601 duration (``PT4M13S``) as ``4m 13s``.

    Returns ``"Unknown"`` for a missing value and the input unchanged when it
    has no hour/minute/second components.
    """
    if not duration:
        return UNKNOWN
    match = _DURATION_PATTERN.search(duration)
    if not match:
        return duration

    hours, minutes, seconds = (group[:-1] if group else "" for group in match.groups())
    result = ""
    if hours:
        result += f"{hours}h "
    if minutes:
        result += f"{minutes}m "
    if seconds:
        result += f"{seconds}s"
    return result.strip() or duration


def format_count(value: int | str | None) -> str:
    """Thousands-separated count, or ``"Unknown"`` when absent."""
    if value is None or value == "":
        return UNKNOWN
    try:
        return f"{int(value):,}"
    except (TypeError, ValueError):
        return str(value)


def format_published_date(published_at: str | None) -> str:
    """``2009-10-25T06:57:33Z`` → ``10/25/2009``; raw value if unparseable."""
    if not published_at:
        return UNKNOWN
    try:
        parsed = datetime.fromisoformat(published_at.replace("Z", "+00:00"))
    except ValueError:
        return published_at
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def clean_formatting(text: str) -> str:
    """Normalise markdown quirks in generated text.

    Applied in order, each step on the previous step's output:

    1. ``****`` collapses to ``**``.
    2. Lines starting ``<n>.`` become ``**<n>.**`` preceded by a blank line.
    3. Runs of three or more newlines collapse to two.
    4. Lines ending in ``:`` (not already bold) become bold labels.
    5. Surrounding whitespace is stripped.
    """
    text = _QUAD_EMPHASIS.sub("**", text)
    text = _NUMBERED_ITEM.sub(r"\n\n**\1.** ", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    text = _LABEL_LINE.sub(r"**\1:**", text)
    return text.strip()


def iso_timestamp(now: datetime | None = None) -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
