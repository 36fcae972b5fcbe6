"""Inverted index construction.

`IndexBuilder` turns ``(url, html)`` entries into documents, vocabulary terms
and postings on any `BaseIndexStore`. `rebuild_index` wraps a full clear plus
build in a single transaction, so readers never see a half-written index and a
failed build leaves the previous one in place.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set

from sqlalchemy.orm import Session, sessionmaker

from edaoogle.exceptions import CorpusError, ParsingError, StorageError
from edaoogle.parsers.base_parser import ParsedDocument
from edaoogle.parsers.html_parser import HTMLParser
from edaoogle.storage.base_store import BaseIndexStore
from edaoogle.storage.database import session_scope
from edaoogle.storage.sql_store import SqlIndexStore

from .corpus import CorpusEntry, CorpusItem, as_entry, entry_label

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BuildReport:
    """Outcome of one build run.

    A URL that occurs several times in one corpus is listed once in `indexed`,
    and `postings` counts the rows the store ends up holding.
    """

    indexed: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)
    terms: int = 0
    postings: int = 0
    elapsed_seconds: float = 0.0

    @property
    def indexed_count(self) -> int:
        return len(self.indexed)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


class IndexBuilder:
    """Populates an index store from a corpus.

    Term ids resolved during a build are cached on the instance and the cache
    is reset at the start of every `build()` call.
    """

    def __init__(self, store: BaseIndexStore, *, parser: Optional[HTMLParser] = None) -> None:
        self.store = store
        self.parser = parser or HTMLParser()
        self._term_ids: Dict[str, int] = {}

    def _term_id(self, word: str) -> int:
        term_id = self._term_ids.get(word)
        if term_id is None:
            term_id = self.store.upsert_term(word)
            self._term_ids[word] = term_id
        return term_id

    def _parse_entry(self, item: Any) -> ParsedDocument:
        entry: CorpusEntry = as_entry(item)
        if entry.content is not None:
            return self.parser.parse_html_content(entry.content, metadata={"url": entry.url})
        if entry.source is not None:
            return self.parser.parse(entry.source)
        raise CorpusError(f"Corpus entry {entry.url} has neither content nor source")

    def index_parsed(self, url: str, parsed: ParsedDocument) -> Counter[str]:
        """Store the postings of an already parsed document."""
        frequencies = Counter(parsed.tokens)
        document_id = self.store.upsert_document(url)
        for word, frequency in frequencies.items():
            self.store.put_posting(self._term_id(word), document_id, frequency)
        return frequencies

    def index_document(self, url: str, html: str) -> Counter[str]:
        """Index one document and return its term frequencies."""
        return self.index_parsed(url, self.parser.parse_html_content(html, metadata={"url": url}))

    def build(self, corpus: Iterable[CorpusItem]) -> BuildReport:
        """Index every readable entry of ``corpus``.

        Malformed or unreadable entries are logged, recorded in the report and
        skipped. `StorageError` is not caught: a failing store aborts the build.
        """
        self._term_ids.clear()
        report = BuildReport()
        terms_by_url: Dict[str, Set[str]] = {}
        started = time.perf_counter()
        logger.info("Building index")

        for position, item in enumerate(corpus):
            url = entry_label(item, position)
            try:
                parsed = self._parse_entry(item)
            except (CorpusError, ParsingError) as exc:
                logger.warning("Skipping %s: %s", url, exc)
                report.failed[url] = str(exc)
                continue
            except Exception as exc:
                logger.exception("Skipping %s: unexpected error", url)
                report.failed[url] = f"{type(exc).__name__}: {exc}"
                continue

            if parsed.source_length == 0:
                logger.warning("Skipping %s: empty document", url)
                report.skipped.append(url)
                continue

            try:
                frequencies = self.index_parsed(url, parsed)
            except StorageError:
                logger.error("Build aborted at %s after %d documents", url, report.indexed_count)
                raise

            if url not in terms_by_url:
                report.indexed.append(url)
                terms_by_url[url] = set()
            # A repeated URL overwrites shared postings and keeps the others
            terms_by_url[url].update(frequencies)
            logger.debug("Indexed %s (%d distinct terms)", url, len(frequencies))

        report.terms = len(self._term_ids)
        report.postings = sum(len(words) for words in terms_by_url.values())
        report.elapsed_seconds = time.perf_counter() - started
        logger.info(
            "Indexed %d documents (%d failed, %d skipped), %d terms, %d postings in %.3fs",
            report.indexed_count,
            report.failed_count,
            len(report.skipped),
            report.terms,
            report.postings,
            report.elapsed_seconds,
        )
        return report


def rebuild_index(
    factory: sessionmaker[Session],
    corpus: Iterable[CorpusItem],
    *,
    parser: Optional[HTMLParser] = None,
) -> BuildReport:
    """Clear the index and build it again from ``corpus`` in one transaction."""
    with session_scope(factory) as session:
        store = SqlIndexStore(session)
        logger.info("Deleting previous entries")
        store.clear_all()
        return IndexBuilder(store, parser=parser).build(corpus)
