"""Long-running HTTP server: FastAPI app exposing /health and /summarize."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Body, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import tracing
from .client import GeminiClient
from .config import configure_logging, get_config
from .errors import InvalidRequestError, error_response
from .formatting import iso_timestamp
from .models.summary import AnalysisRequest, AnalysisResult
from .summarize import summarize_video

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    """Startup/shutdown hook: tracing setup, then tear down shared Gemini clients."""
    tracing.setup()
    yield
    tracing.shutdown()
    closed = await GeminiClient.close_all()
    logger.info("Lifespan shutdown: closed %d client(s)", closed)


app = FastAPI(title="YouTube Summarizer", lifespan=_lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health() -> dict:
    """Liveness plus which API keys are configured."""
    cfg = get_config()
    return {
        "status": "OK",
        "message": "YouTube Summarizer Backend is running!",
        "timestamp": iso_timestamp(),
        "env": {
            "gemini": cfg.has_gemini_key,
            "youtube": cfg.has_youtube_key,
        },
    }


@app.exception_handler(RequestValidationError)
async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer undecodable or wrongly typed bodies with 400 ``{error}``."""
    undecodable = any(err.get("type") == "json_invalid" for err in exc.errors())
    message = "Invalid JSON body" if undecodable else "Invalid request body"
    status, body = error_response(InvalidRequestError(message))
    return JSONResponse(status_code=status, content=body)


@app.post("/summarize", response_model=AnalysisResult)
async def summarize(payload: AnalysisRequest | None = Body(default=None)):
    """Analyze one YouTube video; 400 for bad links, 500 for generation failures.

    A missing body is treated as ``{}`` so the pipeline reports the missing link.
    """
    try:
        result = await summarize_video(payload or AnalysisRequest(), get_config())
    except Exception as exc:
        status, body = error_response(exc)
        if status >= 500:
            logger.exception("Summarize failed")
        return JSONResponse(status_code=status, content=body)
    return result


def main() -> None:
    """Entry-point for the ``youtube-summarizer`` console script."""
    import uvicorn

    cfg = get_config()
    configure_logging(cfg.log_level)
    logger.info("Server starting on %s:%d", cfg.host, cfg.port)
    logger.info("Gemini API key: %s", "configured" if cfg.has_gemini_key else "missing")
    logger.info("YouTube API key: %s", "configured" if cfg.has_youtube_key else "missing")
    uvicorn.run(app, host=cfg.host, port=cfg.port, log_level=cfg.log_level.lower())


if __name__ == "__main__":
    main()
