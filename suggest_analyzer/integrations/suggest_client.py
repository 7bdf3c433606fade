"""Google Autocomplete keyword suggestions (no API key needed)."""

import json
import logging
from typing import Optional

import httpx

from suggest_analyzer.utils.helpers import truncate_text

AUTOCOMPLETE_URL = "https://suggestqueries.google.com/complete/search"


class GoogleSuggestClient:
    """Fetch autocomplete candidates for a seed keyword.

    The endpoint answers in the encoding of the requested locale (Shift_JIS
    for ``hl=ja``), so the raw body is decoded explicitly before parsing.

    Usage::

        client = GoogleSuggestClient(language="ja", encoding="shift_jis")
        suggestions = await client.get_suggestions("seo")
        await client.close()
    """

    def __init__(
        self,
        language: str = "ja",
        encoding: str = "shift_jis",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._language = language
        self._encoding = encoding
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None
        self._log = logger or logging.getLogger(__name__)

    def _get_http_client(self) -> httpx.AsyncClient:
        """Lazily create and return the HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def get_suggestions(self, keyword: str) -> list[str]:
        """Return autocomplete candidates for ``keyword``.

        Never raises: transport, status, decode and parse failures are
        logged and reported as an empty list.
        """
        client = self._get_http_client()
        try:
            response = await client.get(
                AUTOCOMPLETE_URL,
                params={"client": "firefox", "q": keyword, "hl": self._language},
            )
            response.raise_for_status()
            data = json.loads(response.content.decode(self._encoding, errors="replace"))
            self._log.info(
                "Raw Google Suggest payload: %s",
                truncate_text(json.dumps(data, ensure_ascii=False), 2000),
            )
        except httpx.HTTPStatusError as exc:
            self._log.warning(
                "Google Suggest request failed: %s (body: %s)",
                exc, truncate_text(exc.response.text),
            )
            return []
        except (httpx.HTTPError, ValueError, LookupError) as exc:
            # JSONDecodeError is a ValueError; unknown codecs raise LookupError
            self._log.warning("Google Suggest request failed: %s", exc)
            return []

        # Response format: [query, [suggestion1, suggestion2, ...], ...]
        if isinstance(data, list) and len(data) >= 2 and isinstance(data[1], list):
            return [s for s in data[1] if isinstance(s, str)]
        return []

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
