"""Single-invocation handler for serverless platforms.

Takes an API-gateway style event (``httpMethod``, ``body``) and returns
``{statusCode, headers, body}`` with a JSON string body. Unlike the
long-running server it answers CORS preflight itself and rejects methods
other than GET, POST and OPTIONS with 405.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import json
import logging
from typing import Any

from pydantic import ValidationError

from .config import configure_logging, get_config
from .errors import InvalidRequestError, MethodNotAllowedError, error_response
from .formatting import iso_timestamp
from .models.summary import AnalysisRequest
from .summarize import summarize_video

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE",
}

FEATURES = ["Real video metadata", "Video transcripts", "AI analysis"]


def _response(status_code: int, body: dict | None = None) -> dict:
    return {
        "statusCode": status_code,
        "headers": {**CORS_HEADERS, "Content-Type": "application/json"},
        "body": "" if body is None else json.dumps(body, ensure_ascii=False),
    }


def _health() -> dict:
    cfg = get_config()
    return {
        "status": "OK",
        "message": "YouTube Summarizer API is running",
        "timestamp": iso_timestamp(),
        "geminiApiKeyExists": cfg.has_gemini_key,
        "youtubeApiKeyExists": cfg.has_youtube_key,
        "features": FEATURES,
    }


def parse_request(event: dict[str, Any]) -> AnalysisRequest:
    """Decode the event body into an AnalysisRequest.

    A missing body counts as ``{}`` so the orchestrator reports the missing
    link. Base64-encoded bodies are decoded first.

    Raises:
        InvalidRequestError: Body is not a JSON object or has wrongly typed fields.
    """
    raw = event.get("body") or "{}"
    try:
        if event.get("isBase64Encoded"):
            raw = base64.b64decode(raw).decode("utf-8")
        payload = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidRequestError("Invalid JSON body") from exc
    if not isinstance(payload, dict):
        raise InvalidRequestError("Invalid JSON body")
    try:
        return AnalysisRequest.model_validate(payload)
    except ValidationError as exc:
        raise InvalidRequestError("Invalid request body") from exc


async def async_handler(event: dict[str, Any], context: Any = None) -> dict:
    """Route one invocation: OPTIONS preflight, GET health, POST summarize."""
    cfg = get_config()
    configure_logging(cfg.log_level)
    method = (event.get("httpMethod") or "").upper()

    if method == "OPTIONS":
        return _response(200)
    if method == "GET":
        return _response(200, _health())

    try:
        if method != "POST":
            raise MethodNotAllowedError("Method not allowed")
        result = await summarize_video(parse_request(event), cfg)
    except Exception as exc:
        status, body = error_response(exc)
        if status >= 500:
            logger.exception("Summarize failed")
        return _response(status, body)

    return _response(200, result.model_dump(mode="json"))


def handler(event: dict[str, Any], context: Any = None) -> dict:
    """Synchronous entry point for runtimes that call a plain function."""
    return asyncio.run(async_handler(event, context))
