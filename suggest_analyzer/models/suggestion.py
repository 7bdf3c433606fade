"""Suggestion result model produced by the enrichment step."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SuggestionResult:
    """An autocomplete candidate paired with its search result count."""

    keyword: str
    search_volume: int

    def __post_init__(self) -> None:
        if self.search_volume < 0:
            raise ValueError(
                f"search_volume must be >= 0, got {self.search_volume!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"keyword": self.keyword, "search_volume": self.search_volume}

    def __repr__(self) -> str:
        return f"<SuggestionResult keyword={self.keyword!r} vol={self.search_volume}>"
