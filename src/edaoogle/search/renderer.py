"""Presentation of search responses: a JSON-ready payload and an HTML page."""

from __future__ import annotations

from html import escape
from typing import Any, Dict

from .base_search import SearchResponse

_PAGE_HEAD = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8" />
    <title>{title}</title>
    <link rel="stylesheet" href="../css/style.css" />
</head>
<body>
    <article class="edaoogle">
        <div class="title"><a href="/">{title}</a></div>
        <div class="search">
            <form action="/search" method="get">
                <input type="text" name="q" value="{query}" autofocus>
            </form>
        </div>
"""

_PAGE_TAIL = """    </article>
</body>
</html>
"""


def to_payload(response: SearchResponse, *, with_scores: bool = False) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "query": response.query,
        "count": response.count,
        "elapsed_seconds": response.elapsed_seconds,
        "results": response.urls,
    }
    if with_scores:
        payload["scores"] = [{"url": r.url, "score": r.score} for r in response.results]
    return payload


def render_results_page(response: SearchResponse, *, title: str = "EDAoogle") -> str:
    """Render the results page: search box, result count and time, one link per hit.

    The query and URLs are HTML-escaped.
    """
    parts = [_PAGE_HEAD.format(title=escape(title), query=escape(response.query, quote=True))]
    parts.append(
        f'        <div class="results">{response.count} results '
        f"({response.elapsed_seconds:.6f} seconds):</div>\n"
    )
    for url in response.urls:
        safe = escape(url, quote=True)
        parts.append(f'        <div class="result"><a href="{safe}">{safe}</a></div>\n')
    parts.append(_PAGE_TAIL)
    return "".join(parts)
