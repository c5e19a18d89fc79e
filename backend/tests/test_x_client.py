import asyncio

import httpx
import pytest

from app.schemas.search import SearchWindow
from app.services.errors import UpstreamError
from app.services.query_builder import SearchQuery
from app.services.x_client import XSearchClient, index_authors, parse_page

QUERY = SearchQuery(
    query='(("ai")) -is:retweet lang:tr',
    window=SearchWindow(start="2026-03-01T06:00:00.000Z", end="2026-03-01T12:00:00.000Z"),
)

PAYLOAD = {
    "data": [
        {
            "id": "100",
            "text": "hello",
            "created_at": "2026-03-01T10:00:00.000Z",
            "lang": "tr",
            "author_id": "u1",
            "public_metrics": {"like_count": 3, "retweet_count": 1, "reply_count": 0, "quote_count": 0},
        },
        {"id": "101", "text": "no metrics", "author_id": "u2"},
    ],
    "includes": {"users": [{"id": "u1", "username": "acme", "name": "Acme Inc"}]},
}


def _client(handler, page_size=10):
    return XSearchClient(base_url="https://api.example", page_size=page_size, transport=httpx.MockTransport(handler))


def test_request_carries_query_window_fields_and_credential():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json=PAYLOAD)

    page = asyncio.run(_client(handler, page_size=5).search(QUERY, "Bearer caller-token"))

    request = seen[0]
    assert request.url.path == "/2/tweets/search/recent"
    assert request.headers["Authorization"] == "Bearer caller-token"
    params = request.url.params
    assert params["query"] == QUERY.query
    assert params["max_results"] == "5"
    assert params["start_time"] == QUERY.window.start
    assert params["end_time"] == QUERY.window.end
    assert params["tweet.fields"] == "created_at,public_metrics,lang,author_id"
    assert params["expansions"] == "author_id"
    assert params["user.fields"] == "username,name"
    assert [post.id for post in page.posts] == ["100", "101"]


def test_missing_metrics_default_to_zero():
    page = parse_page(PAYLOAD)
    metrics = page.posts[1].public_metrics

    assert (metrics.like_count, metrics.retweet_count, metrics.reply_count, metrics.quote_count) == (0, 0, 0, 0)


def test_null_metric_values_default_to_zero():
    page = parse_page({"data": [{"id": "1", "public_metrics": {"like_count": None, "quote_count": 2}}]})
    assert page.posts[0].public_metrics.like_count == 0
    assert page.posts[0].public_metrics.quote_count == 2


def test_author_index_is_keyed_by_id():
    authors = index_authors(parse_page(PAYLOAD).users)
    assert authors["u1"].username == "acme"
    assert "u2" not in authors


def test_malformed_entries_are_skipped():
    page = parse_page({"data": [{"text": "no id"}, {"id": "1"}], "includes": {"users": "nope"}})
    assert [post.id for post in page.posts] == ["1"]
    assert page.users == []


def test_non_json_success_body_is_empty_page():
    page = asyncio.run(_client(lambda request: httpx.Response(200, text="oops")).search(QUERY, "Bearer t"))
    assert page.posts == []
    assert page.users == []


def test_empty_result_set():
    page = asyncio.run(_client(lambda request: httpx.Response(200, json={"meta": {"result_count": 0}})).search(QUERY, "Bearer t"))
    assert page.posts == []


def test_error_status_is_relayed_with_body():
    body = {"title": "Too Many Requests", "status": 429}

    with pytest.raises(UpstreamError) as info:
        asyncio.run(_client(lambda request: httpx.Response(429, json=body)).search(QUERY, "Bearer t"))

    assert info.value.status_code == 429
    assert info.value.to_body() == {"error": "X API error", "details": body}


def test_error_without_json_body_uses_fallback_details():
    with pytest.raises(UpstreamError) as info:
        asyncio.run(_client(lambda request: httpx.Response(502, text="bad gateway")).search(QUERY, "Bearer t"))

    assert info.value.status_code == 502
    assert info.value.details == {"message": "Unknown error"}


@pytest.mark.parametrize("page_size", [0, 4, 101])
def test_page_size_outside_upstream_bounds_is_rejected(page_size):
    with pytest.raises(ValueError):
        XSearchClient(page_size=page_size)


def test_empty_json_error_body_is_relayed_unchanged():
    with pytest.raises(UpstreamError) as info:
        asyncio.run(_client(lambda request: httpx.Response(403, json={})).search(QUERY, "Bearer t"))

    assert info.value.details == {}


def test_null_text_and_fractional_metrics_keep_the_post():
    page = parse_page({"data": [{"id": "7", "text": None, "public_metrics": {"like_count": 1.5, "reply_count": 2}}]})

    post = page.posts[0]
    assert post.text == ""
    assert post.public_metrics.like_count == 1.5
    assert post.public_metrics.reply_count == 2


def test_smallest_observed_page_size_is_accepted():
    assert XSearchClient(page_size=5).page_size == 5
    assert XSearchClient().page_size == 10
