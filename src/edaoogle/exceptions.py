"""Custom exception hierarchy for EDAoogle.

These exceptions allow callers to discriminate error categories
and handle them appropriately while preserving the original context.
"""

from __future__ import annotations


class EdaoogleError(Exception):
    """Base class for all EDAoogle exceptions."""


class ConfigError(EdaoogleError):
    """Raised when configuration loading or validation fails."""


class CorpusError(EdaoogleError):
    """Raised when a corpus entry (or the corpus directory) cannot be read."""


class ParsingError(EdaoogleError):
    """Raised when a document fails to parse."""


class StorageError(EdaoogleError):
    """Raised when the index store encounters an error (DB, constraint, etc.)."""


class SearchError(EdaoogleError):
    """Raised for query-time failures surfaced to the serving layer."""
