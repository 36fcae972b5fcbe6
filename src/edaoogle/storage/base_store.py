"""Abstract index store interface.

Defines the minimal surface the index builder and the query engine need from a
persistent inverted index, so backends stay swappable and testable behind a
common contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(slots=True, frozen=True)
class IndexStats:
    """Row counts of the three index relations."""

    documents: int
    terms: int
    postings: int


class BaseIndexStore(ABC):
    """Abstract interface for inverted index storage.

    Implementations keep URLs and words unique, never store a posting with a
    frequency below 1, and never let a posting reference a missing document or
    term. Failures of the underlying storage surface as
    `edaoogle.exceptions.StorageError`.
    """

    @abstractmethod
    def upsert_document(self, url: str) -> int:
        """Return the id of the document with ``url``, inserting it if new."""

    @abstractmethod
    def upsert_term(self, word: str) -> int:
        """Return the id of the normalized ``word``, inserting it if new."""

    @abstractmethod
    def put_posting(self, term_id: int, document_id: int, frequency: int) -> None:
        """Store the frequency of a term in a document, replacing any previous value."""

    @abstractmethod
    def lookup_term(self, word: str) -> Optional[int]:
        """Return the id of ``word`` (exact match) or None."""

    @abstractmethod
    def postings_for_term(self, term_id: int) -> List[Tuple[str, int]]:
        """Return ``(url, frequency)`` for every document containing the term."""

    @abstractmethod
    def clear_all(self) -> None:
        """Remove every posting, term and document."""

    @abstractmethod
    def stats(self) -> IndexStats:
        """Return row counts for documents, terms and postings."""
        raise NotImplementedError
