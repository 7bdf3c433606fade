"""Integration tests for Suggest Analyzer.

Covers package imports, configuration loading, the .env manager, the
diagnostic log, the application boundary, CLI smoke tests, and syntax
validation of every Python file in the project.
"""

import ast
import importlib
import logging
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

# ---------------------------------------------------------------------------
# Project root (conftest.py already puts it on sys.path)
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent


# ===========================================================================
# 1. Module imports
# ===========================================================================
class TestModuleImports:
    """All packages should be importable and export their public names."""

    @pytest.mark.parametrize("module_path,names", [
        ("suggest_analyzer.models", ["SuggestionResult"]),
        ("suggest_analyzer.modules.keyword_analysis", [
            "KeywordAnalyzer", "analyze_keywords", "PopularityEstimator",
            "rank_suggestions", "ReportGenerator", "ReportState",
        ]),
        ("suggest_analyzer.integrations.suggest_client", ["GoogleSuggestClient"]),
        ("suggest_analyzer.integrations.custom_search", ["CustomSearchClient"]),
        ("suggest_analyzer.integrations.llm_client", ["LLMClient", "LLMOverloadedError"]),
        ("suggest_analyzer.app", ["SuggestAnalyzerApp"]),
    ])
    def test_module_importable(self, module_path, names):
        mod = importlib.import_module(module_path)
        for name in names:
            assert hasattr(mod, name), name + " not found in " + module_path


# ===========================================================================
# 2. Settings
# ===========================================================================
class TestSettings:

    def test_settings_file_parseable(self):
        from suggest_analyzer.settings import load_settings
        settings = load_settings(str(PROJECT_ROOT / "config" / "settings.yaml"))
        assert settings.suggest_language == "ja"
        assert settings.suggest_encoding == "shift_jis"
        assert settings.max_concurrency is None
        assert settings.result_limit == 5
        assert settings.max_attempts == 3
        assert settings.initial_backoff_seconds == 1.0

    def test_missing_file_uses_defaults(self, tmp_path, caplog):
        from suggest_analyzer.settings import AnalyzerSettings, load_settings
        with caplog.at_level("WARNING"):
            settings = load_settings(str(tmp_path / "nope.yaml"))
        assert settings == AnalyzerSettings()
        assert any("Config file not found" in r.getMessage() for r in caplog.records)

    def test_partial_file_keeps_defaults(self, tmp_path):
        from suggest_analyzer.settings import load_settings
        path = tmp_path / "settings.yaml"
        path.write_text("search:\n  max_concurrency: 4\nreport:\n  model: gemini-2.0-flash\n")
        settings = load_settings(str(path))
        assert settings.max_concurrency == 4
        assert settings.gemini_model == "gemini-2.0-flash"
        assert settings.suggest_language == "ja"

    def test_credentials_from_env(self, monkeypatch):
        from suggest_analyzer.settings import Credentials
        monkeypatch.setenv("GEMINI_API_KEY", "g")
        monkeypatch.setenv("CUSTOM_SEARCH_API_KEY", "s")
        monkeypatch.setenv("SEARCH_ENGINE_ID", "")
        creds = Credentials.from_env()
        assert creds.gemini_api_key == "g"
        assert creds.custom_search_api_key == "s"
        assert creds.search_engine_id is None
        assert not creds.has_search_credentials


# ===========================================================================
# 3. EnvManager
# ===========================================================================
class TestEnvManager:

    def test_set_and_get_key(self, tmp_path, monkeypatch):
        from suggest_analyzer.utils.env_manager import EnvManager
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        manager = EnvManager(str(tmp_path / ".env"))
        manager.set_key("GEMINI_API_KEY", "abcdefghijklmnop")
        monkeypatch.delenv("GEMINI_API_KEY")
        assert manager.get_key("GEMINI_API_KEY") == "abcdefghijklmnop"
        assert manager.load_env()["GEMINI_API_KEY"] == "abcdefghijklmnop"

    def test_status_masks_values(self, tmp_path, monkeypatch):
        from suggest_analyzer.utils.env_manager import EnvManager
        for key in EnvManager.API_KEY_REGISTRY:
            monkeypatch.delenv(key, raising=False)
        path = tmp_path / ".env"
        path.write_text('SEARCH_ENGINE_ID="0123456789abcdef"\n', encoding="utf-8")
        status = EnvManager(str(path)).get_status()
        assert status["SEARCH_ENGINE_ID"]["configured"] is True
        assert status["SEARCH_ENGINE_ID"]["masked_value"] == "0123********cdef"
        assert status["GEMINI_API_KEY"]["configured"] is False


# ===========================================================================
# 4. Diagnostic log
# ===========================================================================
class TestDiagnosticLog:

    def test_pipeline_records_are_appended(self, tmp_path):
        from suggest_analyzer.utils.diagnostics import attach_diagnostic_log, detach_diagnostic_log
        log_path = tmp_path / "analyzer_debug.log"
        attach_diagnostic_log(log_path)
        logging.getLogger("suggest_analyzer.modules.keyword_analysis.analyzer").info("first event")
        logging.getLogger("suggest_analyzer.integrations.custom_search").warning("second event")
        detach_diagnostic_log()

        lines = log_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert lines[0].endswith(" - first event")
        assert lines[1].endswith(" - second event")

    def test_attach_is_idempotent(self, tmp_path):
        from suggest_analyzer.utils.diagnostics import attach_diagnostic_log
        first = attach_diagnostic_log(tmp_path / "a.log")
        assert attach_diagnostic_log(tmp_path / "a.log") is first
        pkg = logging.getLogger("suggest_analyzer")
        assert sum(1 for h in pkg.handlers if h is first) == 1


# ===========================================================================
# 5. Application boundary
# ===========================================================================
class TestSuggestAnalyzerApp:

    def _make_app(self, tmp_path):
        from suggest_analyzer.app import SuggestAnalyzerApp
        app = SuggestAnalyzerApp(
            config_path=str(tmp_path / "settings.yaml"),
            env_path=str(tmp_path / ".env"),
            attach_log_file=False,
        )
        app.initialize()
        return app

    def test_requires_initialize(self):
        from suggest_analyzer.app import SuggestAnalyzerApp
        with pytest.raises(RuntimeError):
            SuggestAnalyzerApp().get_status()

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_generic_message(self, tmp_path):
        from suggest_analyzer.app import GENERIC_ERROR_MESSAGE
        app = self._make_app(tmp_path)
        with patch(
            "suggest_analyzer.modules.keyword_analysis.analyze_keywords",
            AsyncMock(side_effect=KeyError("boom")),
        ):
            assert await app.run_analysis("seo") == GENERIC_ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_run_analysis_returns_pipeline_text(self, tmp_path):
        app = self._make_app(tmp_path)
        mock = AsyncMock(return_value="report text")
        with patch("suggest_analyzer.modules.keyword_analysis.analyze_keywords", mock):
            assert await app.run_analysis("seo", count=3) == "report text"
        assert mock.await_args.kwargs["limit"] == 3

    def test_status_reports_missing_credentials(self, tmp_path, monkeypatch):
        for key in ("GEMINI_API_KEY", "CUSTOM_SEARCH_API_KEY", "SEARCH_ENGINE_ID"):
            monkeypatch.delenv(key, raising=False)
        status = self._make_app(tmp_path).get_status()
        assert status["gemini"]["status"] == "warning"
        assert status["custom_search"]["status"] == "warning"
        assert status["config"]["status"] == "warning"


# ===========================================================================
# 6. CLI commands (smoke test via CliRunner)
# ===========================================================================
class TestCLICommands:

    def _get_runner_and_app(self):
        from typer.testing import CliRunner
        from suggest_analyzer.cli import app
        return CliRunner(), app

    def test_main_help(self):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, ["--help"])
        assert result.exit_code == 0
        assert "Suggest Analyzer" in result.output

    @pytest.mark.parametrize("command", ["analyze", "suggest", "status", "set-key"])
    def test_command_help(self, command):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, [command, "--help"])
        assert result.exit_code == 0, result.output

    def test_analyze_prints_report(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner, cli_app = self._get_runner_and_app()
        with patch(
            "suggest_analyzer.modules.keyword_analysis.analyze_keywords",
            AsyncMock(return_value="CLI report body"),
        ):
            result = runner.invoke(cli_app, ["analyze", "seo", "--count", "3"])
        assert result.exit_code == 0, result.output
        assert "CLI report body" in result.output

    def test_analyze_rejects_zero_count(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(cli_app, ["analyze", "seo", "--count", "0"])
        assert result.exit_code != 0

    def test_set_key_rejects_unknown_name(self, tmp_path):
        runner, cli_app = self._get_runner_and_app()
        result = runner.invoke(
            cli_app, ["set-key", "NOT_A_KEY", "x", "--env", str(tmp_path / ".env")],
        )
        assert result.exit_code == 1
        assert not (tmp_path / ".env").exists()

    def test_set_key_writes_env(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SEARCH_ENGINE_ID", raising=False)
        runner, cli_app = self._get_runner_and_app()
        env_path = tmp_path / ".env"
        result = runner.invoke(cli_app, ["set-key", "SEARCH_ENGINE_ID", "cx-123", "--env", str(env_path)])
        monkeypatch.delenv("SEARCH_ENGINE_ID", raising=False)
        assert result.exit_code == 0, result.output
        assert 'SEARCH_ENGINE_ID="cx-123"' in env_path.read_text(encoding="utf-8")

    def test_log_level_read_from_env_file(self, tmp_path, monkeypatch):
        from suggest_analyzer.cli import _resolve_log_level
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        env_path = tmp_path / ".env"
        env_path.write_text('LOG_LEVEL="warning"\n', encoding="utf-8")
        assert _resolve_log_level(False, str(env_path)) == logging.WARNING
        assert _resolve_log_level(True, str(env_path)) == logging.DEBUG

    @pytest.mark.parametrize("value,expected", [
        ("ERROR", logging.ERROR),
        ("not-a-level", logging.INFO),
        (None, logging.INFO),
    ])
    def test_log_level_from_environment(self, tmp_path, monkeypatch, value, expected):
        from suggest_analyzer.cli import _resolve_log_level
        if value is None:
            monkeypatch.delenv("LOG_LEVEL", raising=False)
        else:
            monkeypatch.setenv("LOG_LEVEL", value)
        assert _resolve_log_level(False, str(tmp_path / ".env")) == expected


# ===========================================================================
# 7. All Python files syntax validation
# ===========================================================================
class TestAllPythonFilesSyntax:
    """Every .py file in the package and tests should pass ast.parse."""

    def test_all_python_files_parse(self):
        py_files = []
        for directory in ("suggest_analyzer", "tests"):
            for py_file in (PROJECT_ROOT / directory).rglob("*.py"):
                if "__pycache__" not in py_file.parts:
                    py_files.append(py_file)
        assert len(py_files) > 0, "No Python files found"
        errors = []
        for py_file in sorted(py_files):
            try:
                ast.parse(py_file.read_text(encoding="utf-8"))
            except SyntaxError as exc:
                errors.append(str(py_file.relative_to(PROJECT_ROOT)) + ": " + str(exc))
        if errors:
            pytest.fail("Python syntax errors:\n" + "\n".join(errors))
