"""FastMCP server exposing the summarize pipeline as an MCP tool."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastmcp import FastMCP

from . import tracing
from .client import GeminiClient
from .config import configure_logging, get_config
from .tools.summarize import summarize_server

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(server: FastMCP):
    """Startup/shutdown hook: tracing setup, then tear down shared Gemini clients."""
    tracing.setup()
    yield {}
    tracing.shutdown()
    closed = await GeminiClient.close_all()
    logger.info("Lifespan shutdown: closed %d client(s)", closed)


app = FastMCP(
    "youtube-summarizer",
    instructions=(
        "Summarize YouTube videos from their metadata and captions with Gemini. "
        "Call video_summarize with a video URL."
    ),
    lifespan=_lifespan,
)

app.mount(summarize_server)


def main() -> None:
    """Entry-point for the ``youtube-summarizer-mcp`` console script."""
    configure_logging(get_config().log_level)
    app.run()


if __name__ == "__main__":
    main()
