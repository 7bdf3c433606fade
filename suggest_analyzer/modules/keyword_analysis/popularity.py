"""Popularity estimation: score each candidate by its search result count."""

import asyncio
import logging
from typing import Optional, Protocol

from suggest_analyzer.models import SuggestionResult


class ResultCounter(Protocol):
    async def get_result_count(self, query: str) -> int: ...


class PopularityEstimator:
    """Fan out one result-count lookup per candidate and wait for all of them.

    By default every candidate is looked up at once.  ``max_concurrency``
    caps the number of lookups in flight with a semaphore.

    Usage::

        estimator = PopularityEstimator(CustomSearchClient(...), max_concurrency=5)
        results = await estimator.estimate_all(["seo tools", "seo meaning"])
    """

    def __init__(
        self,
        counter: ResultCounter,
        max_concurrency: Optional[int] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1 or None")
        self._counter = counter
        self._max_concurrency = max_concurrency
        self._log = logger or logging.getLogger(__name__)

    async def estimate(self, keyword: str) -> SuggestionResult:
        """Estimate a single candidate; any failure yields volume 0."""
        try:
            count = int(await self._counter.get_result_count(keyword))
        except Exception as exc:
            self._log.warning("Result count lookup failed for %r: %s", keyword, exc)
            count = 0
        result = SuggestionResult(keyword=keyword, search_volume=max(0, count))
        self._log.info("Keyword: %s, search result count: %d", keyword, result.search_volume)
        return result

    async def estimate_all(self, keywords: list[str]) -> list[SuggestionResult]:
        """Estimate every candidate; output order matches input order."""
        if not keywords:
            return []

        if self._max_concurrency is None:
            return list(await asyncio.gather(*(self.estimate(kw) for kw in keywords)))

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _bounded(kw: str) -> SuggestionResult:
            async with semaphore:
                return await self.estimate(kw)

        return list(await asyncio.gather(*(_bounded(kw) for kw in keywords)))
