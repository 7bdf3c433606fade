"""Plain data models shared across the analysis pipeline."""

from suggest_analyzer.models.suggestion import SuggestionResult

__all__ = ["SuggestionResult"]
