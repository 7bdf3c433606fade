"""Ranking filter for enriched suggestions."""

from typing import Iterable

from suggest_analyzer.models import SuggestionResult

DEFAULT_RESULT_LIMIT = 5


def rank_suggestions(
    results: Iterable[SuggestionResult],
    limit: int = DEFAULT_RESULT_LIMIT,
) -> list[SuggestionResult]:
    """Keep results with a positive volume, lowest volume first, at most ``limit``.

    Ascending order is intentional: the report is about low-competition
    keywords, not the most popular ones.  The sort is stable, so ties keep
    their input order and ranking a ranked list returns it unchanged.

    Example:
        [(A, 50), (B, 0), (C, 10), (D, 200)] -> [(C, 10), (A, 50), (D, 200)]
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit!r}")
    kept = [r for r in results if r.search_volume > 0]
    kept.sort(key=lambda r: r.search_volume)
    return kept[:limit]
