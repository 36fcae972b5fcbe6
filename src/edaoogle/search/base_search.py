"""Abstract search interface for querying the index.

Defines the minimal surface for query engines, enabling extensibility and
testability via a common contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Represents a single search hit."""

    url: str
    score: int


@dataclass(slots=True)
class SearchResponse:
    """Ranked hits for one query plus the time it took to compute them."""

    query: str
    results: List[SearchResult] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def count(self) -> int:
        return len(self.results)

    @property
    def urls(self) -> List[str]:
        return [r.url for r in self.results]


class BaseSearch(ABC):
    """Abstract interface for query engines."""

    @abstractmethod
    def ranked(self, query: str) -> List[SearchResult]:
        """Execute a search query and return ranked results."""
        raise NotImplementedError

    def search(self, query: str) -> List[str]:
        """Execute a search query and return the ranked URLs."""
        return [r.url for r in self.ranked(query)]
