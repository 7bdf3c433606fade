"""Shared pytest fixtures for Suggest Analyzer tests."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Ensure project root is on sys.path so 'suggest_analyzer' is importable.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)


@pytest.fixture(autouse=True)
def _detach_diagnostic_log():
    """Autouse fixture: never leave a diagnostic file handler attached between tests."""
    from suggest_analyzer.utils.diagnostics import detach_diagnostic_log
    detach_diagnostic_log()
    yield
    detach_diagnostic_log()


@pytest.fixture()
def make_results():
    """Build SuggestionResult lists from (keyword, volume) pairs."""
    from suggest_analyzer.models import SuggestionResult

    def _make(pairs):
        return [SuggestionResult(keyword=k, search_volume=v) for k, v in pairs]
    return _make


@pytest.fixture()
def mock_llm_client():
    """Return a mock LLMClient that returns a canned report."""
    client = MagicMock()
    client.generate_text = AsyncMock(return_value="Mock Gemini report.")
    return client


@pytest.fixture()
def mock_suggest_client():
    """Return a mock GoogleSuggestClient with three candidates."""
    client = MagicMock()
    client.get_suggestions = AsyncMock(return_value=[
        "seo tools",
        "seo meaning",
        "seo optimization",
    ])
    client.close = AsyncMock()
    return client


@pytest.fixture()
def mock_search_client():
    """Return a mock CustomSearchClient with fixed counts per query."""
    counts = {"seo tools": 500, "seo meaning": 0, "seo optimization": 120}
    client = MagicMock()
    client.get_result_count = AsyncMock(side_effect=lambda q: counts.get(q, 0))
    client.close = AsyncMock()
    return client


@pytest.fixture()
def recorded_sleep():
    """An async sleep replacement that records requested delays instead of waiting."""
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep


@pytest.fixture()
def prompt_file(tmp_path):
    """A minimal prompt template with the input placeholder."""
    path = tmp_path / "suggest.gprompt"
    path.write_text("Analyse these keywords:\n{{input}}\n", encoding="utf-8")
    return path
