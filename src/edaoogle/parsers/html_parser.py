"""HTML parser producing the text and tokens the index is built from.

Markup is removed with the plain tag-state scanner from
`edaoogle.parsers.tokenizer` rather than a real HTML parser, so indexing and
querying agree exactly on what counts as a word.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from edaoogle.exceptions import ParsingError

from .base_parser import BaseParser, ParsedDocument
from .tokenizer import extract_tokens, strip_markup


class HTMLParser(BaseParser):
    """Parser for HTML content; `encoding` decodes files and byte strings."""

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def parse(self, path: Path) -> ParsedDocument:
        """Parse an HTML file from disk."""
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise ParsingError(f"Cannot read {path}: {exc}") from exc
        return self.parse_html_content(raw, metadata={"source_path": str(path)})

    def parse_html_content(
        self, html: Union[str, bytes], *, metadata: Optional[Dict[str, Any]] = None
    ) -> ParsedDocument:
        """Parse HTML given as text, or as bytes in `self.encoding`."""
        if isinstance(html, bytes):
            try:
                html = html.decode(self.encoding)
            except UnicodeDecodeError as exc:
                raise ParsingError(f"Content is not valid {self.encoding}: {exc}") from exc
        elif not isinstance(html, str):
            raise ParsingError(f"Expected text or bytes, got {type(html).__name__}")

        text = strip_markup(html)
        return ParsedDocument(
            text=text,
            tokens=extract_tokens(text),
            source_length=len(html),
            metadata=metadata or {},
        )
