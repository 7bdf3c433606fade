"""Keyword analysis pipeline: suggest -> estimate -> rank -> report."""

import json
import logging
from typing import Optional, Protocol, Sequence

from suggest_analyzer.models import SuggestionResult
from suggest_analyzer.modules.keyword_analysis.popularity import PopularityEstimator
from suggest_analyzer.modules.keyword_analysis.ranking import (
    DEFAULT_RESULT_LIMIT,
    rank_suggestions,
)
from suggest_analyzer.modules.keyword_analysis.report_generator import ReportGenerator
from suggest_analyzer.settings import AnalyzerSettings, Credentials

NO_KEYWORD_MESSAGE = "No keyword was provided."
NO_SUGGESTIONS_MESSAGE = "No suggested keywords were found."
NO_ANALYZABLE_MESSAGE = "No analyzable keywords were found."


class SuggestionSource(Protocol):
    async def get_suggestions(self, keyword: str) -> list[str]: ...


class ReportWriter(Protocol):
    async def generate(self, results: Sequence[SuggestionResult]) -> str: ...


class KeywordAnalyzer:
    """Sequence the suggestion-analysis steps for one seed keyword.

    Every outcome is a plain string: the generated report, a fallback
    listing, or one of the fixed short-circuit messages.

    Usage::

        analyzer = KeywordAnalyzer(
            suggest_client=GoogleSuggestClient(),
            estimator=PopularityEstimator(CustomSearchClient(key, cx)),
            report_generator=ReportGenerator(api_key=gemini_key),
        )
        report = await analyzer.analyze("seo", limit=5)
    """

    def __init__(
        self,
        suggest_client: SuggestionSource,
        estimator: PopularityEstimator,
        report_generator: ReportWriter,
        logger: Optional[logging.Logger] = None,
    ):
        self._suggest = suggest_client
        self._estimator = estimator
        self._reporter = report_generator
        self._log = logger or logging.getLogger(__name__)

    async def analyze(self, keyword: str, limit: int = DEFAULT_RESULT_LIMIT) -> str:
        """Run the pipeline for ``keyword`` and return the report text."""
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit!r}")
        if not keyword or not keyword.strip():
            return NO_KEYWORD_MESSAGE

        suggestions = await self._suggest.get_suggestions(keyword)
        self._log.info(
            "Fetched suggestions: %s", json.dumps(suggestions, ensure_ascii=False),
        )
        if not suggestions:
            return NO_SUGGESTIONS_MESSAGE

        results = await self._estimator.estimate_all(suggestions)
        ranked = rank_suggestions(results, limit=limit)
        self._log.info(
            "Results after filtering and sorting: %s",
            json.dumps([r.to_dict() for r in ranked], ensure_ascii=False),
        )
        if not ranked:
            return NO_ANALYZABLE_MESSAGE

        return await self._reporter.generate(ranked)


async def analyze_keywords(
    keyword: str,
    credentials: Optional[Credentials] = None,
    limit: Optional[int] = None,
    settings: Optional[AnalyzerSettings] = None,
) -> str:
    """Build the default collaborators, analyse ``keyword`` and clean up.

    Each credential is wired to its own client: the Custom Search key and
    engine id go to the result-count lookup, the Gemini key only to the
    report generator.
    """
    from suggest_analyzer.integrations.custom_search import CustomSearchClient
    from suggest_analyzer.integrations.suggest_client import GoogleSuggestClient

    credentials = credentials or Credentials.from_env()
    settings = settings or AnalyzerSettings()
    limit = settings.result_limit if limit is None else limit

    suggest_client = GoogleSuggestClient(
        language=settings.suggest_language,
        encoding=settings.suggest_encoding,
        timeout=settings.http_timeout_seconds,
    )
    search_client = CustomSearchClient(
        api_key=credentials.custom_search_api_key,
        search_engine_id=credentials.search_engine_id,
        timeout=settings.http_timeout_seconds,
    )
    analyzer = KeywordAnalyzer(
        suggest_client=suggest_client,
        estimator=PopularityEstimator(
            search_client, max_concurrency=settings.max_concurrency,
        ),
        report_generator=ReportGenerator(
            api_key=credentials.gemini_api_key,
            model=settings.gemini_model,
            prompt_path=settings.prompt_path,
            max_attempts=settings.max_attempts,
            initial_backoff=settings.initial_backoff_seconds,
            top_n=limit,
        ),
    )
    try:
        return await analyzer.analyze(keyword, limit=limit)
    finally:
        await suggest_client.close()
        await search_client.close()
