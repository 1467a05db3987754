"""Shared Gemini client pool and the single-shot analysis call."""

from __future__ import annotations

import logging

from google import genai
from google.genai import types

from .config import ModelFamily
from .errors import ApiKeyMissingError, GenerationError
from .formatting import clean_formatting

logger = logging.getLogger(__name__)


class GeminiClient:
    """Process-wide Gemini client pool (one client per API key)."""

    _clients: dict[str, genai.Client] = {}

    @classmethod
    def get(cls, api_key: str) -> genai.Client:
        """Return (or create) the shared client for *api_key*."""
        if not api_key:
            raise ApiKeyMissingError("No Gemini API key configured; set GEMINI_API_KEY")
        if api_key not in cls._clients:
            cls._clients[api_key] = genai.Client(api_key=api_key)
            logger.info("Created Gemini client (key …%s)", api_key[-4:])
        return cls._clients[api_key]

    @staticmethod
    def generation_config(family: ModelFamily) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=family.temperature,
            top_p=family.top_p,
            max_output_tokens=family.max_output_tokens,
        )

    @classmethod
    async def analyze(
        cls,
        prompt: str,
        *,
        model: str,
        family: ModelFamily,
        api_key: str,
    ) -> str:
        """Generate the analysis text for *prompt*.

        One ``generate_content`` call with the family's sampling settings;
        the family's cleanup pass runs on the result when enabled.

        Args:
            prompt: Fully composed prompt.
            model: Gemini model id.
            family: Model family resolved for *model*.
            api_key: Gemini API key.

        Returns:
            Generated text.

        Raises:
            GenerationError: Missing key, API error, or transport failure.
        """
        try:
            client = cls.get(api_key)
            response = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=cls.generation_config(family),
            )
            text = response.text or ""
        except Exception as exc:
            raise GenerationError(f"Failed to generate analysis: {exc}") from exc

        if family.clean_output:
            text = clean_formatting(text)
        return text

    @classmethod
    async def close_all(cls) -> int:
        """Shut down all shared clients. Returns count closed."""
        count = 0
        for client in list(cls._clients.values()):
            try:
                await client.aio.aclose()
            except Exception:
                logger.debug("Gemini async client close failed", exc_info=True)
            try:
                client.close()
            except Exception:
                logger.debug("Gemini client close failed", exc_info=True)
            count += 1
        cls._clients.clear()
        logger.info("Closed %d Gemini client(s)", count)
        return count
