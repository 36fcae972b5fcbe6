"""Markup stripping and word tokenization shared by indexing and querying.

Both steps are deliberately naive character scanners:

* ``strip_markup`` treats ``<`` as entering a tag and ``>`` as leaving it.
  There is no escaping and no awareness of attribute values or comments, so a
  ``>`` inside an attribute value ends the tag early. A ``<`` that is never
  closed swallows the rest of the input.
* ``extract_tokens`` emits maximal runs of ASCII letters and digits, lowercased.
  Everything else, non-ASCII letters included, only separates tokens.

Queries must go through ``extract_tokens`` too, otherwise a query term would
not normalize the way it was indexed and could never match.
"""

from __future__ import annotations

from typing import List


def strip_markup(html: str) -> str:
    """Drop everything between ``<`` and ``>`` (delimiters included)."""
    out: List[str] = []
    inside_tag = False
    for ch in html:
        if ch == "<":
            inside_tag = True
        elif ch == ">":
            inside_tag = False
        elif not inside_tag:
            out.append(ch)
    return "".join(out)


def _is_word_char(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


def extract_tokens(text: str) -> List[str]:
    """Split ``text`` into lowercase ASCII alphanumeric tokens, keeping duplicates."""
    tokens: List[str] = []
    current: List[str] = []
    for ch in text:
        if _is_word_char(ch):
            current.append(ch.lower())
        elif current:
            tokens.append("".join(current))
            current.clear()
    if current:
        tokens.append("".join(current))
    return tokens
