"""Environment variable manager for API keys and settings.

Provides read/write access to the .env file holding the Gemini and
Custom Search credentials used by the analysis pipeline.
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional


class EnvManager:
    """Manages .env file for API keys and configuration."""

    API_KEY_REGISTRY = {
        "GEMINI_API_KEY": {
            "category": "AI / LLM",
            "label": "Google Gemini API Key",
            "description": "Generates the competitive keyword report (simple listing when unset)",
            "required": False,
            "docs_url": "https://aistudio.google.com/app/apikey",
            "is_secret": True,
        },
        "CUSTOM_SEARCH_API_KEY": {
            "category": "Google APIs",
            "label": "Custom Search API Key",
            "description": "Looks up search result counts (random placeholder counts when unset)",
            "required": False,
            "docs_url": "https://developers.google.com/custom-search/v1/overview",
            "is_secret": True,
        },
        "SEARCH_ENGINE_ID": {
            "category": "Google APIs",
            "label": "Programmable Search Engine ID",
            "description": "The cx identifier of the search engine used for result counts",
            "required": False,
            "docs_url": "https://programmablesearchengine.google.com/",
        },
        "LOG_LEVEL": {
            "category": "App Settings",
            "label": "Log Level",
            "description": "Logging verbosity: DEBUG, INFO, WARNING, ERROR",
            "required": False,
            "docs_url": "",
        },
    }

    def __init__(self, env_path: Optional[str] = None):
        """Initialize with path to .env file (defaults to ./.env)."""
        self.env_path = Path(env_path) if env_path else Path.cwd() / ".env"

    def load_env(self) -> dict[str, str]:
        """Load all variables from .env file."""
        env_vars: dict[str, str] = {}
        if not self.env_path.exists():
            return env_vars

        with open(self.env_path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" in line:
                    key, _, value = line.partition("=")
                    env_vars[key.strip()] = value.strip().strip('"').strip("'")
        return env_vars

    def save_env(self, env_vars: dict[str, str]) -> None:
        """Save variables to .env file grouped by registry category."""
        categories: dict[str, list[str]] = {}
        for key, meta in self.API_KEY_REGISTRY.items():
            categories.setdefault(meta["category"], []).append(key)

        lines = [
            "# Suggest Analyzer: Environment Configuration",
            f"# Last updated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
            "# WARNING: Keep this file private. Never commit to version control.",
            "",
        ]
        for category, keys in categories.items():
            lines.append(f"# {'=' * 50}")
            lines.append(f"# {category}")
            lines.append(f"# {'=' * 50}")
            for key in keys:
                value = env_vars.get(key, "")
                lines.append(f"# {self.API_KEY_REGISTRY[key]['description']}")
                lines.append(f'{key}="{value}"' if value else f"{key}=")
                lines.append("")

        custom_keys = [k for k in env_vars if k not in self.API_KEY_REGISTRY]
        if custom_keys:
            lines.append(f"# {'=' * 50}")
            lines.append("# Custom / Additional Keys")
            lines.append(f"# {'=' * 50}")
            for key in custom_keys:
                lines.append(f'{key}="{env_vars[key]}"')

        self.env_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.env_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")

    def get_key(self, key_name: str) -> Optional[str]:
        """Get a single key value, falling back to os.environ."""
        value = self.load_env().get(key_name, "") or os.environ.get(key_name, "")
        return value or None

    def set_key(self, key_name: str, value: str) -> None:
        """Set a single key value in the .env file and the current process."""
        env_vars = self.load_env()
        env_vars[key_name] = value
        self.save_env(env_vars)
        os.environ[key_name] = value

    def get_status(self) -> dict[str, dict]:
        """Get configuration status for all registered keys."""
        env_vars = self.load_env()
        status = {}
        for key, meta in self.API_KEY_REGISTRY.items():
            value = env_vars.get(key, "") or os.environ.get(key, "")
            status[key] = {
                **meta,
                "configured": bool(value),
                "masked_value": self._mask_value(value) if value else "",
            }
        return status

    @staticmethod
    def _mask_value(value: str) -> str:
        """Mask a value for display (show first 4 and last 4 chars)."""
        if len(value) <= 10:
            return "*" * len(value)
        return value[:4] + "*" * (len(value) - 8) + value[-4:]
