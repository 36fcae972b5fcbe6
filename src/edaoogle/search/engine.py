"""Term-frequency query engine.

A document's score for a query is the sum, over the distinct query terms found
in the vocabulary, of that term's frequency in the document. Documents are
ranked by score (highest first) and then by URL, so equal scores always come
back in the same order.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List

from edaoogle.parsers.tokenizer import extract_tokens
from edaoogle.storage.base_store import BaseIndexStore

from .base_search import BaseSearch, SearchResponse, SearchResult

logger = logging.getLogger(__name__)


def query_terms(query: str) -> List[str]:
    """Normalize ``query`` exactly like indexed text, dropping repeated terms."""
    return list(dict.fromkeys(extract_tokens(query)))


class QueryEngine(BaseSearch):
    """Read-only search over a `BaseIndexStore`."""

    def __init__(self, store: BaseIndexStore) -> None:
        self.store = store

    def score(self, query: str) -> Dict[str, int]:
        """Return the accumulated score of every document matching ``query``."""
        scores: Dict[str, int] = {}
        terms = query_terms(query)
        matched = 0
        for term in terms:
            term_id = self.store.lookup_term(term)
            if term_id is None:
                continue
            matched += 1
            for url, frequency in self.store.postings_for_term(term_id):
                scores[url] = scores.get(url, 0) + frequency
        logger.debug("Query %r: %d terms, %d in vocabulary", query, len(terms), matched)
        return scores

    def ranked(self, query: str) -> List[SearchResult]:
        scores = self.score(query)
        ordered = sorted(scores.items(), key=lambda item: (-item[1], item[0]))
        return [SearchResult(url=url, score=score) for url, score in ordered]

    def run(self, query: str) -> SearchResponse:
        """Rank ``query`` and time it, for the rendering layer."""
        started = time.perf_counter()
        results = self.ranked(query)
        elapsed = time.perf_counter() - started
        logger.debug("Query %r: %d results in %.4fs", query, len(results), elapsed)
        return SearchResponse(query=query, results=results, elapsed_seconds=elapsed)
