from edaoogle.search.base_search import SearchResponse, SearchResult
from edaoogle.search.renderer import render_results_page, to_payload


def make_response() -> SearchResponse:
    return SearchResponse(
        query="cat dog",
        results=[SearchResult("/wiki/a.html", 3), SearchResult("/wiki/b.html", 2)],
        elapsed_seconds=0.25,
    )


def test_payload_lists_urls_count_and_time() -> None:
    payload = to_payload(make_response())

    assert payload == {
        "query": "cat dog",
        "count": 2,
        "elapsed_seconds": 0.25,
        "results": ["/wiki/a.html", "/wiki/b.html"],
    }


def test_page_shows_count_time_and_links_in_rank_order() -> None:
    page = render_results_page(make_response())

    assert '<div class="results">2 results (0.250000 seconds):</div>' in page
    assert page.index('<a href="/wiki/a.html">') < page.index('<a href="/wiki/b.html">')
    assert 'value="cat dog"' in page


def test_page_escapes_query_and_urls() -> None:
    response = SearchResponse(
        query='"><script>alert(1)</script>',
        results=[SearchResult('/wiki/<x>.html', 1)],
    )

    page = render_results_page(response)

    assert "<script>" not in page
    assert "&lt;script&gt;" in page
    assert "/wiki/&lt;x&gt;.html" in page


def test_empty_response_renders_zero_results() -> None:
    page = render_results_page(SearchResponse(query=""))
    assert "0 results (" in page
    assert 'class="result"' not in page
