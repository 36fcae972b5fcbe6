import asyncio
import contextlib
import json
import time
from typing import Any, Dict, List, Optional, Union

import pytest
from fastmcp import Client, FastMCP
from sqlalchemy.orm import Session, sessionmaker

from edaoogle.config import Settings
from edaoogle.exceptions import StorageError
from edaoogle.indexing.builder import rebuild_index
from edaoogle.mcp.tools import register_search_tools
from edaoogle.storage.sql_store import SqlIndexStore


class DummyState:
    def __init__(self, session_factory: Optional[sessionmaker[Session]]) -> None:
        self.settings = Settings()
        self.settings.app.name = "TestSearch"
        self.session_factory = session_factory


def _extract_json_payload(result: Any) -> Union[Dict[str, Any], List[Dict[str, Any]], str]:
    if isinstance(result, (dict, list, str)):
        return result
    content = getattr(result, "content", None)
    if isinstance(content, list) and content:
        for item in content:
            text = getattr(item, "text", None)
            if isinstance(text, str):
                try:
                    return json.loads(text)
                except json.JSONDecodeError:
                    return text
    raise AssertionError("Unable to extract JSON payload from tool result")


def make_server(state: DummyState) -> FastMCP:
    mcp = FastMCP("test")
    register_search_tools(mcp, get_state=lambda: state)
    return mcp


@pytest.fixture()
def indexed_factory(factory: sessionmaker[Session]) -> sessionmaker[Session]:
    rebuild_index(factory, [("/wiki/a.html", "cat dog cat"), ("/wiki/b.html", "dog dog")])
    return factory


@pytest.mark.asyncio
async def test_search_tool_returns_ranked_urls(indexed_factory: sessionmaker[Session]) -> None:
    client = Client(make_server(DummyState(indexed_factory)))
    async with client:
        res = await client.call_tool("search", {"q": "cat dog", "with_scores": True})

    payload = _extract_json_payload(res)
    assert isinstance(payload, dict)
    assert payload["query"] == "cat dog"
    assert payload["count"] == 2
    assert payload["results"] == ["/wiki/a.html", "/wiki/b.html"]
    assert payload["scores"] == [
        {"url": "/wiki/a.html", "score": 3},
        {"url": "/wiki/b.html", "score": 2},
    ]
    assert payload["elapsed_seconds"] >= 0


@pytest.mark.asyncio
async def test_search_tool_unknown_term_is_empty(indexed_factory: sessionmaker[Session]) -> None:
    client = Client(make_server(DummyState(indexed_factory)))
    async with client:
        res = await client.call_tool("search", {"q": "banana"})

    payload = _extract_json_payload(res)
    assert isinstance(payload, dict)
    assert payload["count"] == 0
    assert payload["results"] == []


@pytest.mark.asyncio
async def test_search_page_tool_renders_html(indexed_factory: sessionmaker[Session]) -> None:
    client = Client(make_server(DummyState(indexed_factory)))
    async with client:
        res = await client.call_tool("search_page", {"q": "dog"})

    page = _extract_json_payload(res)
    assert isinstance(page, str)
    assert "<title>TestSearch</title>" in page
    assert "2 results (" in page
    assert page.index('href="/wiki/b.html"') < page.index('href="/wiki/a.html"')


@pytest.mark.asyncio
async def test_index_stats_tool(indexed_factory: sessionmaker[Session]) -> None:
    client = Client(make_server(DummyState(indexed_factory)))
    async with client:
        res = await client.call_tool("index_stats", {})

    payload = _extract_json_payload(res)
    assert payload == {"documents": 2, "terms": 2, "postings": 3}


@pytest.mark.asyncio
async def test_search_without_database_raises() -> None:
    client = Client(make_server(DummyState(None)))
    async with client:
        with pytest.raises(Exception):
            await client.call_tool("search", {"q": "cat"})


@pytest.mark.asyncio
async def test_search_storage_failure_is_an_error_not_empty_result(
    indexed_factory: sessionmaker[Session], monkeypatch: pytest.MonkeyPatch
) -> None:
    def fail(self: SqlIndexStore, word: str) -> None:
        raise StorageError("database disk image is malformed")

    monkeypatch.setattr(SqlIndexStore, "lookup_term", fail)

    client = Client(make_server(DummyState(indexed_factory)))
    async with client:
        with pytest.raises(Exception):
            await client.call_tool("search", {"q": "cat"})


@pytest.mark.asyncio
async def test_slow_search_does_not_block_the_event_loop(
    indexed_factory: sessionmaker[Session], monkeypatch: pytest.MonkeyPatch
) -> None:
    real_lookup = SqlIndexStore.lookup_term

    def slow_lookup(self: SqlIndexStore, word: str) -> Optional[int]:
        time.sleep(0.5)
        return real_lookup(self, word)

    monkeypatch.setattr(SqlIndexStore, "lookup_term", slow_lookup)

    gaps: List[float] = []

    async def ticker() -> None:
        last = time.perf_counter()
        while True:
            await asyncio.sleep(0.05)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    client = Client(make_server(DummyState(indexed_factory)))
    async with client:
        task = asyncio.create_task(ticker())
        try:
            res = await client.call_tool("search", {"q": "cat"})
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    payload = _extract_json_payload(res)
    assert isinstance(payload, dict)
    assert payload["results"] == ["/wiki/a.html"]
    assert gaps
    assert max(gaps) < 0.3
