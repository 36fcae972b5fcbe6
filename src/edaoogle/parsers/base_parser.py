"""Abstract base classes and data structures for document parsers.

Parsers turn a raw corpus file into the visible text and the normalized word
tokens the index builder counts.

Concrete implementations should subclass `BaseParser` and implement `parse()`.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List


@dataclass(slots=True)
class ParsedDocument:
    """Container for parsed document outputs.

    Attributes
    ----------
    text: str
        The document text with markup removed.
    tokens: list[str]
        Normalized word tokens in document order, duplicates retained.
    source_length: int
        Number of characters in the source before markup removal; 0 means
        the source itself was empty.
    metadata: dict
        Free-form details about the source (e.g. ``source_path``).
    """

    text: str = ""
    tokens: List[str] = field(default_factory=list)
    source_length: int = 0
    metadata: Dict[str, Any] = field(default_factory=dict)


class BaseParser(ABC):
    """Abstract parser interface."""

    @abstractmethod
    def parse(self, path: Path) -> ParsedDocument:
        """Parse the file and return a `ParsedDocument`.

        Implementations should raise `edaoogle.exceptions.ParsingError` on failure.
        """
        raise NotImplementedError
