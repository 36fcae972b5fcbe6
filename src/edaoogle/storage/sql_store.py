"""SQLAlchemy implementation of the index store.

Works on a caller-provided `Session`, so the caller decides the transaction
boundary: the index builder runs a whole rebuild inside one `session_scope`,
while each query opens its own short-lived session. Every statement goes
through the SQLAlchemy expression language with bound parameters.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from edaoogle.exceptions import StorageError

from .base_store import BaseIndexStore, IndexStats
from .models import Document, Posting, Term


@contextmanager
def _storage_errors(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"Failed to {action}: {exc}") from exc


class SqlIndexStore(BaseIndexStore):
    """Index store backed by the `documents`/`words`/`word_occurrences` tables."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert_document(self, url: str) -> int:
        with _storage_errors(f"upsert document {url!r}"):
            doc_id = self.session.scalar(select(Document.id).where(Document.url == url))
            if doc_id is not None:
                return doc_id
            doc = Document(url=url)
            self.session.add(doc)
            self.session.flush()
            return doc.id

    def upsert_term(self, word: str) -> int:
        with _storage_errors(f"upsert term {word!r}"):
            term_id = self.session.scalar(select(Term.id).where(Term.word == word))
            if term_id is not None:
                return term_id
            term = Term(word=word)
            self.session.add(term)
            self.session.flush()
            return term.id

    def put_posting(self, term_id: int, document_id: int, frequency: int) -> None:
        if frequency < 1:
            raise ValueError(f"Posting frequency must be >= 1, got {frequency}")
        with _storage_errors(f"store posting ({term_id}, {document_id})"):
            posting = self.session.get(Posting, (term_id, document_id))
            if posting is None:
                self.session.add(
                    Posting(term_id=term_id, document_id=document_id, frequency=frequency)
                )
            else:
                posting.frequency = frequency
            # Flush now so a dangling reference fails on this call, not at commit
            self.session.flush()

    def lookup_term(self, word: str) -> Optional[int]:
        with _storage_errors(f"look up term {word!r}"):
            return self.session.scalar(select(Term.id).where(Term.word == word))

    def postings_for_term(self, term_id: int) -> List[Tuple[str, int]]:
        stmt = (
            select(Document.url, Posting.frequency)
            .join(Document, Document.id == Posting.document_id)
            .where(Posting.term_id == term_id)
            .order_by(Document.url)
        )
        with _storage_errors(f"read postings of term {term_id}"):
            return [(url, freq) for url, freq in self.session.execute(stmt)]

    def clear_all(self) -> None:
        with _storage_errors("clear the index"):
            # Postings first so no row ever points at a deleted document or term
            self.session.execute(delete(Posting))
            self.session.execute(delete(Term))
            self.session.execute(delete(Document))
            self.session.expunge_all()

    def stats(self) -> IndexStats:
        with _storage_errors("count index rows"):
            return IndexStats(
                documents=self.session.scalar(select(func.count()).select_from(Document)) or 0,
                terms=self.session.scalar(select(func.count()).select_from(Term)) or 0,
                postings=self.session.scalar(select(func.count()).select_from(Posting)) or 0,
            )
