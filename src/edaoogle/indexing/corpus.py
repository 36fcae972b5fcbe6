"""Corpus sources for the index builder.

The builder only sees `CorpusEntry` objects (or plain ``(url, content)``
pairs); scanning the web root for HTML files happens here. Reading and
decoding an entry is the parser's job.
"""

from __future__ import annotations

import reprlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, Tuple, Union

from edaoogle.exceptions import CorpusError


@dataclass(slots=True)
class CorpusEntry:
    """One document to index.

    Either ``content`` (text or bytes) is given directly, or the file at
    ``source`` is parsed when the builder reaches the entry.
    """

    url: str
    source: Optional[Path] = None
    content: Optional[Union[str, bytes]] = None


CorpusItem = Union[CorpusEntry, Tuple[str, Union[str, bytes]]]


def entry_label(item: Any, position: int) -> str:
    """Name an item for build reports, even when it is malformed."""
    if isinstance(item, CorpusEntry):
        return item.url
    if isinstance(item, (tuple, list)) and item and isinstance(item[0], str):
        return item[0]
    return f"<corpus entry #{position}>"


def as_entry(item: Any) -> CorpusEntry:
    """Normalize a ``(url, content)`` pair into a `CorpusEntry`."""
    if isinstance(item, CorpusEntry):
        return item
    if isinstance(item, (tuple, list)) and len(item) == 2 and isinstance(item[0], str):
        return CorpusEntry(url=item[0], content=item[1])
    raise CorpusError(f"Expected a (url, content) pair, got {reprlib.repr(item)}")


def iter_corpus(
    www_path: Union[str, Path],
    *,
    subdir: str = "wiki",
    url_prefix: str = "/wiki/",
    extensions: Sequence[str] = (".html",),
) -> Iterator[CorpusEntry]:
    """Yield an entry per matching file directly under ``<www_path>/<subdir>``.

    Files are visited in name order and become ``<url_prefix><filename>``.
    Subdirectories are not descended into.
    """
    root = Path(www_path) / subdir
    if not root.is_dir():
        raise CorpusError(f"Corpus directory not found: {root}")

    wanted = {ext.lower() for ext in extensions}
    try:
        paths = sorted(p for p in root.iterdir() if p.is_file() and p.suffix.lower() in wanted)
    except OSError as exc:
        raise CorpusError(f"Cannot list {root}: {exc}") from exc

    for path in paths:
        yield CorpusEntry(url=f"{url_prefix}{path.name}", source=path)
