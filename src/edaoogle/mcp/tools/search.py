"""Search tools for FastMCP.

Expose the query engine and index statistics over the persistent index.
Each call runs in its own read-only session on a worker thread, so a slow
query never stalls the event loop.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict

from fastmcp import FastMCP
from sqlalchemy.orm import Session, sessionmaker

from edaoogle.exceptions import SearchError, StorageError
from edaoogle.search.base_search import SearchResponse
from edaoogle.search.engine import QueryEngine
from edaoogle.search.renderer import render_results_page, to_payload
from edaoogle.storage.base_store import IndexStats
from edaoogle.storage.database import session_scope
from edaoogle.storage.sql_store import SqlIndexStore


def register_search_tools(mcp: FastMCP, get_state: Callable[[], Any]) -> None:
    """Register search tools on the given FastMCP instance.

    Reads the session factory from state.session_factory and the page title
    from state.settings.app.name.
    """

    def _factory() -> sessionmaker[Session]:
        state = get_state()
        factory = getattr(state, "session_factory", None)
        if factory is None:
            raise SearchError("Index database is not configured")
        return factory

    def _run(q: str) -> SearchResponse:
        try:
            with session_scope(_factory()) as session:
                return QueryEngine(SqlIndexStore(session)).run(q)
        except StorageError as exc:
            raise SearchError(f"Search failed: {exc}") from exc

    @mcp.tool
    async def search(q: str, with_scores: bool = False) -> Dict[str, Any]:
        """Search the index for documents containing the words of ``q``.

        Returns the matching URLs ranked by total term frequency, with the
        result count and processing time. ``with_scores`` adds per-URL scores.
        """
        response = await asyncio.to_thread(_run, q)
        return to_payload(response, with_scores=with_scores)

    @mcp.tool
    async def search_page(q: str) -> str:
        """Search the index and return the results as an HTML page."""
        state = get_state()
        settings = getattr(state, "settings", None)
        title = getattr(getattr(settings, "app", None), "name", None) or "EDAoogle"
        response = await asyncio.to_thread(_run, q)
        return render_results_page(response, title=title)

    def _stats() -> IndexStats:
        try:
            with session_scope(_factory()) as session:
                return SqlIndexStore(session).stats()
        except StorageError as exc:
            raise SearchError(f"Cannot read index statistics: {exc}") from exc

    @mcp.tool
    async def index_stats() -> Dict[str, int]:
        """Number of documents, vocabulary terms and postings in the index."""
        stats = await asyncio.to_thread(_stats)
        return {"documents": stats.documents, "terms": stats.terms, "postings": stats.postings}
