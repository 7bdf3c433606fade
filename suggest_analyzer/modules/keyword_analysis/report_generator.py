"""Competitive keyword report generation with Gemini.

The Gemini call is driven by a small explicit state machine::

    ATTEMPTING --response--------------> SUCCESS
    ATTEMPTING --overload (503)--------> BUSY_RETRY
    ATTEMPTING --any other failure-----> ERROR_FALLBACK
    BUSY_RETRY --attempts remain-------> (sleep, double backoff) ATTEMPTING
    BUSY_RETRY --no attempts left------> EXHAUSTED_FALLBACK

Every fallback, and the missing-key shortcut, returns the same plain
"Top N" listing behind a header explaining why no narrative was produced.
"""

import asyncio
import enum
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Awaitable, Callable, Optional, Sequence

from suggest_analyzer.integrations.llm_client import LLMClient, is_overload_error
from suggest_analyzer.models import SuggestionResult
from suggest_analyzer.utils.helpers import format_volume, parse_volume

DEFAULT_PROMPT_PATH = Path(__file__).resolve().parents[2] / "prompts" / "suggest.gprompt"
PROMPT_PLACEHOLDER = "{{input}}"

MISSING_KEY_HEADER = (
    "[ERROR] GEMINI_API_KEY is not set in the environment.\n"
    "Generating a simple report instead.\n\n"
)
OVERLOADED_HEADER = (
    "[ERROR] The Gemini API is currently overloaded. "
    "Please try again in a little while.\n\n"
)
GENERATION_FAILED_HEADER = "[ERROR] Report generation with Gemini failed.\n"

_LISTING_TITLE = "--- Competitive Keywords Top {top_n} ---"
_LISTING_LINE = re.compile(r"^\s*(\d+)\.\s(.+)\s\(([\d,]+) results\)\s*$")


class ReportState(enum.Enum):
    NO_KEY_FALLBACK = "no_key_fallback"
    ATTEMPTING = "attempting"
    BUSY_RETRY = "busy_retry"
    EXHAUSTED_FALLBACK = "exhausted_fallback"
    ERROR_FALLBACK = "error_fallback"
    SUCCESS = "success"


@dataclass(frozen=True)
class ReportOutcome:
    """Final report text plus how the state machine got there."""

    text: str
    state: ReportState
    attempts: int
    delays: tuple[float, ...] = ()


def format_keyword_listing(
    results: Sequence[SuggestionResult], top_n: int = 5,
) -> str:
    """Render the numbered fallback listing used by every degraded report."""
    lines = [_LISTING_TITLE.format(top_n=top_n)]
    for i, r in enumerate(results, start=1):
        lines.append(f"{i}. {r.keyword} ({format_volume(r.search_volume)} results)")
    return "\n".join(lines)


def parse_keyword_listing(text: str) -> list[SuggestionResult]:
    """Recover the keyword/volume pairs from a fallback report."""
    parsed: list[SuggestionResult] = []
    in_listing = False
    for line in text.splitlines():
        if line.startswith("--- Competitive Keywords Top"):
            in_listing = True
            continue
        if not in_listing:
            continue
        match = _LISTING_LINE.match(line)
        if match:
            volume = parse_volume(match.group(3)) or 0
            parsed.append(SuggestionResult(keyword=match.group(2), search_volume=volume))
    return parsed


def load_prompt_template(path: Optional[str | Path] = None) -> str:
    """Read the report prompt template (UTF-8)."""
    prompt_path = Path(path) if path else DEFAULT_PROMPT_PATH
    return prompt_path.read_text(encoding="utf-8")


def build_prompt(template: str, results: Sequence[SuggestionResult]) -> str:
    """Substitute the serialised result list into the template placeholder."""
    payload = json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False)
    return template.replace(PROMPT_PLACEHOLDER, payload, 1)


class ReportGenerator:
    """Turn the ranked suggestions into a competitive keyword report.

    Usage::

        generator = ReportGenerator(api_key=os.getenv("GEMINI_API_KEY"))
        report = await generator.generate(ranked_results)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        llm_client: Optional[LLMClient] = None,
        model: str = "gemini-1.5-flash",
        prompt_path: Optional[str | Path] = None,
        max_attempts: int = 3,
        initial_backoff: float = 1.0,
        top_n: int = 5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        logger: Optional[logging.Logger] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._api_key = api_key or ""
        self._llm = llm_client
        self._model = model
        self._prompt_path = prompt_path
        self._max_attempts = max_attempts
        self._initial_backoff = initial_backoff
        self._top_n = top_n
        self._sleep = sleep
        self._log = logger or logging.getLogger(__name__)

    def _get_llm_client(self) -> LLMClient:
        if self._llm is None:
            self._llm = LLMClient(api_key=self._api_key, model=self._model)
        return self._llm

    async def generate(self, results: Sequence[SuggestionResult]) -> str:
        """Return the report text; never raises for API failures."""
        outcome = await self.generate_outcome(results)
        return outcome.text

    async def generate_outcome(self, results: Sequence[SuggestionResult]) -> ReportOutcome:
        """Run the report state machine and return the text with its final state."""
        listing = format_keyword_listing(results, self._top_n)

        if not self._api_key:
            self._log.warning("GEMINI_API_KEY is not set; returning a simple report.")
            return ReportOutcome(
                text=MISSING_KEY_HEADER + listing,
                state=ReportState.NO_KEY_FALLBACK,
                attempts=0,
            )

        try:
            prompt = build_prompt(load_prompt_template(self._prompt_path), results)
            llm = self._get_llm_client()
        except Exception as exc:
            self._log.error("Could not prepare the Gemini request: %s", exc)
            return ReportOutcome(
                text=self._error_text(exc, listing),
                state=ReportState.ERROR_FALLBACK,
                attempts=0,
            )

        state = ReportState.ATTEMPTING
        remaining = self._max_attempts
        delay = self._initial_backoff
        attempts = 0
        delays: list[float] = []
        text = ""
        error: Optional[BaseException] = None

        while True:
            if state is ReportState.ATTEMPTING:
                attempts += 1
                try:
                    text = await llm.generate_text(prompt)
                    state = ReportState.SUCCESS
                except Exception as exc:
                    error = exc
                    state = (
                        ReportState.BUSY_RETRY if is_overload_error(exc)
                        else ReportState.ERROR_FALLBACK
                    )

            elif state is ReportState.BUSY_RETRY:
                remaining -= 1
                self._log.warning(
                    "Gemini API is busy. Retrying... (remaining: %d)", remaining,
                )
                if remaining > 0:
                    delays.append(delay)
                    await self._sleep(delay)
                    delay *= 2
                    state = ReportState.ATTEMPTING
                else:
                    state = ReportState.EXHAUSTED_FALLBACK

            elif state is ReportState.SUCCESS:
                self._log.info("Report generated after %d attempt(s).", attempts)
                return ReportOutcome(text, state, attempts, tuple(delays))

            elif state is ReportState.EXHAUSTED_FALLBACK:
                self._log.error("All Gemini API retries failed.")
                return ReportOutcome(
                    OVERLOADED_HEADER + listing, state, attempts, tuple(delays),
                )

            else:
                self._log.error("Report generation with Gemini failed: %s", error)
                return ReportOutcome(
                    self._error_text(error, listing), state, attempts, tuple(delays),
                )

    @staticmethod
    def _error_text(error: Optional[BaseException], listing: str) -> str:
        message = str(error) or type(error).__name__
        return f"{GENERATION_FAILED_HEADER}{message}\n\n{listing}"
