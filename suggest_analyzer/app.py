"""Application object wiring configuration, logging and the analysis pipeline."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from suggest_analyzer.settings import (
    DEFAULT_CONFIG_PATH,
    AnalyzerSettings,
    Credentials,
    load_settings,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. See the diagnostic log for details."


class SuggestAnalyzerApp:
    """Presentation-side entry point for keyword analysis.

    Loads ``.env`` and ``config/settings.yaml``, attaches the diagnostic
    log, and runs the pipeline behind a last-resort guard so callers only
    ever receive a string.

    Usage::

        app = SuggestAnalyzerApp()
        app.initialize()
        report = await app.run_analysis("seo", count=5)
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        env_path: str = ".env",
        attach_log_file: bool = True,
    ):
        self._config_path = config_path
        self._env_path = env_path
        self._attach_log_file = attach_log_file
        self.settings = AnalyzerSettings()
        self.credentials = Credentials()
        self._initialized = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Load environment and configuration; idempotent."""
        if self._initialized:
            return

        env_file = Path(self._env_path)
        if env_file.exists():
            load_dotenv(env_file)
            logger.info("Loaded environment from %s", self._env_path)

        self.settings = load_settings(self._config_path)
        self.credentials = Credentials.from_env()

        if self._attach_log_file:
            from suggest_analyzer.utils.diagnostics import attach_diagnostic_log
            attach_diagnostic_log(self.settings.diagnostic_log)

        logger.info(
            "GEMINI_API_KEY: %s, CUSTOM_SEARCH_API_KEY: %s, SEARCH_ENGINE_ID: %s",
            _loaded(self.credentials.gemini_api_key),
            _loaded(self.credentials.custom_search_api_key),
            _loaded(self.credentials.search_engine_id),
        )
        self._initialized = True

    # ------------------------------------------------------------------
    # Pipeline execution
    # ------------------------------------------------------------------

    async def run_analysis(self, keyword: str, count: Optional[int] = None) -> str:
        """Analyse ``keyword``; unexpected exceptions become a generic message."""
        self._ensure_initialized()
        from suggest_analyzer.modules.keyword_analysis import analyze_keywords

        logger.info("Running analysis for %r (count=%s)", keyword, count)
        try:
            return await analyze_keywords(
                keyword,
                credentials=self.credentials,
                limit=count,
                settings=self.settings,
            )
        except Exception:
            logger.exception("Keyword analysis failed for %r", keyword)
            return GENERIC_ERROR_MESSAGE

    async def fetch_suggestions(self, keyword: str) -> list[str]:
        """Return the raw autocomplete candidates for ``keyword``."""
        self._ensure_initialized()
        from suggest_analyzer.integrations.suggest_client import GoogleSuggestClient

        client = GoogleSuggestClient(
            language=self.settings.suggest_language,
            encoding=self.settings.suggest_encoding,
            timeout=self.settings.http_timeout_seconds,
        )
        try:
            return await client.get_suggestions(keyword)
        finally:
            await client.close()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> dict[str, dict[str, Any]]:
        """Return configuration status of each external dependency."""
        self._ensure_initialized()
        creds = self.credentials
        return {
            "gemini": {
                "status": "ok" if creds.gemini_api_key else "warning",
                "details": (
                    f"model {self.settings.gemini_model}" if creds.gemini_api_key
                    else "no key: simple listing report"
                ),
            },
            "custom_search": {
                "status": "ok" if creds.has_search_credentials else "warning",
                "details": (
                    "configured" if creds.has_search_credentials
                    else "missing key or engine id: synthetic result counts"
                ),
            },
            "config": {
                "status": "ok" if Path(self._config_path).exists() else "warning",
                "details": self._config_path,
            },
            "diagnostic_log": {
                "status": "ok" if self._attach_log_file else "warning",
                "details": os.path.abspath(self.settings.diagnostic_log)
                if self._attach_log_file else "disabled",
            },
        }

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("Call initialize() before using the application.")


def _loaded(value: Optional[str]) -> str:
    return "Loaded" if value else "NOT LOADED"
