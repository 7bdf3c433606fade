"""Keyword analysis module -- suggestion fetch, popularity scoring, ranking and reporting."""

from suggest_analyzer.modules.keyword_analysis.analyzer import (
    KeywordAnalyzer,
    analyze_keywords,
)
from suggest_analyzer.modules.keyword_analysis.popularity import PopularityEstimator
from suggest_analyzer.modules.keyword_analysis.ranking import rank_suggestions
from suggest_analyzer.modules.keyword_analysis.report_generator import (
    ReportGenerator,
    ReportState,
)

__all__ = [
    "KeywordAnalyzer",
    "analyze_keywords",
    "PopularityEstimator",
    "rank_suggestions",
    "ReportGenerator",
    "ReportState",
]
