"""Credentials and tunables for the keyword analysis pipeline."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/settings.yaml"


@dataclass(frozen=True)
class Credentials:
    """API credentials; any of them may be missing.

    A missing Gemini key makes the report fall back to a plain listing; a
    missing Custom Search key or engine id makes result counts synthetic.
    """

    gemini_api_key: Optional[str] = None
    custom_search_api_key: Optional[str] = None
    search_engine_id: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Credentials":
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            custom_search_api_key=os.getenv("CUSTOM_SEARCH_API_KEY") or None,
            search_engine_id=os.getenv("SEARCH_ENGINE_ID") or None,
        )

    @property
    def has_search_credentials(self) -> bool:
        return bool(self.custom_search_api_key and self.search_engine_id)


@dataclass(frozen=True)
class AnalyzerSettings:
    """Tunables read from ``config/settings.yaml``."""

    suggest_language: str = "ja"
    suggest_encoding: str = "shift_jis"
    max_concurrency: Optional[int] = None
    result_limit: int = 5
    gemini_model: str = "gemini-1.5-flash"
    max_attempts: int = 3
    initial_backoff_seconds: float = 1.0
    prompt_path: Optional[str] = None
    http_timeout_seconds: float = 30.0
    diagnostic_log: str = "analyzer_debug.log"

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "AnalyzerSettings":
        """Build settings from the parsed YAML sections, keeping defaults for gaps."""
        suggest_cfg = config.get("suggest", {}) or {}
        search_cfg = config.get("search", {}) or {}
        analysis_cfg = config.get("analysis", {}) or {}
        report_cfg = config.get("report", {}) or {}
        http_cfg = config.get("http", {}) or {}
        log_cfg = config.get("logging", {}) or {}
        defaults = cls()

        max_concurrency = search_cfg.get("max_concurrency", defaults.max_concurrency)
        return cls(
            suggest_language=suggest_cfg.get("language", defaults.suggest_language),
            suggest_encoding=suggest_cfg.get("encoding", defaults.suggest_encoding),
            max_concurrency=int(max_concurrency) if max_concurrency else None,
            result_limit=int(analysis_cfg.get("result_limit", defaults.result_limit)),
            gemini_model=report_cfg.get("model", defaults.gemini_model),
            max_attempts=int(report_cfg.get("max_attempts", defaults.max_attempts)),
            initial_backoff_seconds=float(
                report_cfg.get("initial_backoff_seconds", defaults.initial_backoff_seconds)
            ),
            prompt_path=report_cfg.get("prompt_path", defaults.prompt_path),
            http_timeout_seconds=float(
                http_cfg.get("timeout_seconds", defaults.http_timeout_seconds)
            ),
            diagnostic_log=log_cfg.get("diagnostic_log", defaults.diagnostic_log),
        )


def load_settings(config_path: str = DEFAULT_CONFIG_PATH) -> AnalyzerSettings:
    """Load the YAML configuration file, falling back to defaults when absent."""
    config_file = Path(config_path)
    if not config_file.exists():
        logger.warning("Config file not found: %s; using defaults.", config_path)
        return AnalyzerSettings()
    with open(config_file, "r", encoding="utf-8") as fh:
        config = yaml.safe_load(fh) or {}
    logger.info("Configuration loaded from %s", config_path)
    return AnalyzerSettings.from_dict(config)
