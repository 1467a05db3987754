"""Load API keys from a per-user ``.env`` file.

``~/.config/youtube-summarizer/.env`` fills in variables that the process
environment leaves unset, so the server and the function handler pick up
the same credentials wherever they are launched from.
"""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_ENV_PATH = Path.home() / ".config" / "youtube-summarizer" / ".env"


def _strip_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]
    return value


def _is_unset(key: str, value: str | None) -> bool:
    """Blank values and unexpanded ``$KEY`` / ``${KEY}`` references count as unset."""
    if value is None:
        return True
    normalized = _strip_quotes(value.strip()).strip()
    if not normalized:
        return True
    return normalized in {f"${key}", f"${{{key}}}"}


def parse_dotenv(path: Path) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines, skipping blanks and ``#`` comments.

    ``export`` prefixes and surrounding quotes are stripped. No variable
    expansion is performed.
    """
    result: dict[str, str] = {}
    if not path.is_file():
        return result

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        line = line.removeprefix("export ")
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        result[key] = _strip_quotes(value.strip())
    return result


def load_dotenv(path: Path | None = None) -> dict[str, str]:
    """Copy values from *path* into ``os.environ`` where the key is unset.

    Returns:
        The variables that were actually injected.
    """
    parsed = parse_dotenv(path or DEFAULT_ENV_PATH)
    injected: dict[str, str] = {}
    for key, value in parsed.items():
        if _is_unset(key, os.environ.get(key)):
            os.environ[key] = value
            injected[key] = value
    return injected
