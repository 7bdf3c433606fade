"""Google Gemini client used to write the keyword report."""

import asyncio
import logging

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

logger = logging.getLogger(__name__)


class LLMOverloadedError(RuntimeError):
    """Gemini reported it is temporarily overloaded (HTTP 503)."""


def is_overload_error(exc: BaseException) -> bool:
    """Return True when ``exc`` signals a transient 503 from Gemini."""
    if isinstance(exc, (LLMOverloadedError, google_exceptions.ServiceUnavailable)):
        return True
    return "503" in str(exc)


class LLMClient:
    """Async wrapper around the synchronous Gemini SDK.

    Overload responses are re-raised as :class:`LLMOverloadedError` so that
    callers can retry them separately from every other failure.

    Usage::

        client = LLMClient(api_key="...")
        text = await client.generate_text("Summarise these keywords ...")
    """

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash"):
        if not api_key:
            raise ValueError("A Gemini API key is required.")
        self._model_name = model
        genai.configure(api_key=api_key)

    async def generate_text(self, prompt: str) -> str:
        """Generate text for ``prompt`` and return it unmodified."""
        try:
            return await self._call_gemini(prompt)
        except Exception as exc:
            if is_overload_error(exc):
                raise LLMOverloadedError(str(exc)) from exc
            raise

    async def _call_gemini(self, prompt: str) -> str:
        """Call Google Gemini API."""
        model = genai.GenerativeModel(model_name=self._model_name)
        # Run synchronous Gemini call in a thread to keep async interface
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None, model.generate_content, prompt
        )
        text = response.text or ""
        logger.info("Gemini call completed (len=%d)", len(text))
        return text
