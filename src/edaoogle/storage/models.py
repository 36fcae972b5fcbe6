"""SQLAlchemy models for the EDAoogle inverted index.

Defines the three relations of the index: Document, Term and Posting, stored
in the `documents`, `words` and `word_occurrences` tables that existing
`index.db` files use, so those databases stay readable.
"""

from __future__ import annotations

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """SQLAlchemy declarative base."""


class Document(Base):
    """An indexed document, identified by its URL."""

    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    postings: Mapped[list[Posting]] = relationship(
        back_populates="document", cascade="all, delete-orphan", passive_deletes=True
    )


class Term(Base):
    """A vocabulary entry; `word` is already normalized when stored."""

    __tablename__ = "words"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    word: Mapped[str] = mapped_column(Text, unique=True, nullable=False)

    postings: Mapped[list[Posting]] = relationship(
        back_populates="term", cascade="all, delete-orphan", passive_deletes=True
    )


class Posting(Base):
    """How many times one term occurs in one document."""

    __tablename__ = "word_occurrences"
    __table_args__ = (
        CheckConstraint("frequency >= 1", name="ck_word_occurrences_frequency_positive"),
        Index("idx_word_occurrences", "word_id", "document_id"),
    )

    term_id: Mapped[int] = mapped_column(
        "word_id", ForeignKey("words.id", ondelete="CASCADE"), primary_key=True
    )
    document_id: Mapped[int] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True
    )
    frequency: Mapped[int] = mapped_column(Integer, nullable=False)

    term: Mapped[Term] = relationship(back_populates="postings")
    document: Mapped[Document] = relationship(back_populates="postings")


Index("idx_word", Term.word)
