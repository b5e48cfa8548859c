"""Domain entities for query coordination state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from godseye.domain.entities.media import ResultItem

FETCH_ERROR_MESSAGE = "Failed to load results"


class QueryMode(str, Enum):
    """Whether results come from a user query or the default listing."""

    BROWSE = "browse"
    SEARCH = "search"

    @classmethod
    def for_query(cls, text: str) -> QueryMode:
        """Empty or whitespace-only text always means browse."""
        return cls.SEARCH if text.strip() else cls.BROWSE


class CoordinatorPhase(str, Enum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


@dataclass
class QueryState:
    """Mutable query state, owned by exactly one coordinator.

    ``raw_text`` follows every keystroke; ``committed_query`` only changes
    once the debounce window settles (or on explicit submit).
    """

    raw_text: str = ""
    committed_query: str = ""
    page: int = 1
    mode: QueryMode = QueryMode.BROWSE
    total_pages: int = 0
    total_results: int = 0


@dataclass(frozen=True)
class RequestToken:
    """Identifies one fetch attempt within a request slot."""

    slot: str
    generation: int


@dataclass(frozen=True)
class CoordinatorView:
    """Immutable snapshot handed to presentation layers."""

    items: tuple[ResultItem, ...]
    loading: bool
    error: str | None
    page: int
    total_pages: int
    total_results: int
    mode: QueryMode
    query: str
    raw_text: str
    phase: CoordinatorPhase
