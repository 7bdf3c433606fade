"""Google Custom Search JSON API integration for search result counts."""

import logging
import random
from typing import Optional

import httpx

from suggest_analyzer.utils.helpers import truncate_text

CUSTOM_SEARCH_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
SYNTHETIC_VOLUME_CEILING = 1_000_000


class CustomSearchClient:
    """Look up the approximate number of results Google reports for a query.

    When the API key or the search engine id is missing, the client does
    not call the API at all and returns a pseudo-random count in
    ``[0, 1_000_000)`` instead, so the pipeline can be exercised without
    live credentials.  Pass ``rng`` to make those placeholder counts
    reproducible.

    Usage::

        client = CustomSearchClient(api_key="...", search_engine_id="...")
        count = await client.get_result_count("seo tools")
        await client.close()
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        search_engine_id: Optional[str] = None,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._api_key = api_key or ""
        self._search_engine_id = search_engine_id or ""
        self._timeout = timeout
        self._http_client = http_client
        self._owns_client = http_client is None
        self._rng = rng or random.Random()
        self._log = logger or logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._search_engine_id)

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def get_result_count(self, query: str) -> int:
        """Return the reported total result count for ``query``.

        Returns 0 when the field is missing or unparsable, or when the
        request fails for any reason.
        """
        if not self.is_configured:
            self._log.warning(
                "CUSTOM_SEARCH_API_KEY or SEARCH_ENGINE_ID is not set; "
                "returning a synthetic result count for %r.", query,
            )
            return self._rng.randrange(SYNTHETIC_VOLUME_CEILING)

        client = self._get_http_client()
        try:
            response = await client.get(
                CUSTOM_SEARCH_ENDPOINT,
                params={
                    "key": self._api_key,
                    "cx": self._search_engine_id,
                    "q": query,
                },
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            self._log.warning(
                "Failed to get result count for %r. Error details: %s",
                query, truncate_text(exc.response.text),
            )
            return 0
        except (httpx.HTTPError, ValueError) as exc:
            self._log.warning("Failed to get result count for %r: %s", query, exc)
            return 0

        info = data.get("searchInformation") if isinstance(data, dict) else None
        total = info.get("totalResults") if isinstance(info, dict) else None
        try:
            return max(0, int(total)) if total else 0
        except (TypeError, ValueError):
            self._log.warning("Unparsable totalResults %r for %r", total, query)
            return 0

    async def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
