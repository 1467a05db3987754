"""YouTube URL → video ID extraction."""

from __future__ import annotations

import re

VIDEO_ID_LENGTH = 11

# Greedy prefix: the last recognised marker in the string wins.
_VIDEO_ID_PATTERN = re.compile(
    r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*"
)


def extract_video_id(url: str | None) -> str | None:
    """Return the 11-character video ID in *url*, or None.

    Recognises ``youtu.be/<id>``, ``/v/<id>``, ``/u/<c>/<id>``,
    ``/embed/<id>``, ``watch?v=<id>`` and ``&v=<id>``. The token runs up to
    the next ``#``, ``&`` or ``?`` and must be exactly 11 characters long.
    Never raises.
    """
    if not isinstance(url, str) or not url.strip():
        return None
    match = _VIDEO_ID_PATTERN.match(url.strip())
    if not match:
        return None
    candidate = match.group(2)
    return candidate if len(candidate) == VIDEO_ID_LENGTH else None
