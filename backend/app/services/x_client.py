from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.schemas.search import Author, UpstreamPage, UpstreamPost
from app.services.errors import UpstreamError
from app.services.query_builder import SearchQuery

logger = logging.getLogger(__name__)

RECENT_SEARCH_PATH = "/2/tweets/search/recent"
TWEET_FIELDS = "created_at,public_metrics,lang,author_id"
EXPANSIONS = "author_id"
USER_FIELDS = "username,name"
MIN_PAGE_SIZE = 5
MAX_PAGE_SIZE = 100


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def parse_page(payload: Any) -> UpstreamPage:
    if not isinstance(payload, dict):
        return UpstreamPage()

    posts: list[UpstreamPost] = []
    for raw in _as_list(payload.get("data")):
        try:
            posts.append(UpstreamPost.model_validate(raw))
        except ValidationError:
            logger.debug("Skipping malformed post entry: %r", raw)

    users: list[Author] = []
    includes = payload.get("includes")
    for raw in _as_list(includes.get("users") if isinstance(includes, dict) else None):
        try:
            users.append(Author.model_validate(raw))
        except ValidationError:
            logger.debug("Skipping malformed user entry: %r", raw)

    return UpstreamPage(posts=posts, users=users)


def index_authors(users: list[Author]) -> dict[str, Author]:
    return {user.id: user for user in users if user.id}


class XSearchClient:
    def __init__(
        self,
        base_url: str = "https://api.x.com",
        page_size: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not MIN_PAGE_SIZE <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}, got {page_size}")
        self.base_url = base_url.rstrip("/")
        self.page_size = page_size
        self._transport = transport

    def build_params(self, query: SearchQuery) -> dict[str, str]:
        return {
            "query": query.query,
            "max_results": str(self.page_size),
            "start_time": query.window.start,
            "end_time": query.window.end,
            "tweet.fields": TWEET_FIELDS,
            "expansions": EXPANSIONS,
            "user.fields": USER_FIELDS,
        }

    async def search(self, query: SearchQuery, authorization: str) -> UpstreamPage:
        """Run one recent-search request with the caller's own credential.

        Raises UpstreamError on a non-success status. A success response whose
        body is not JSON is read as an empty page.
        """
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.get(
                f"{self.base_url}{RECENT_SEARCH_PATH}",
                params=self.build_params(query),
                headers={"Authorization": authorization},
            )

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not response.is_success:
            logger.warning("Search API answered HTTP %s", response.status_code)
            details = payload if payload is not None else {"message": "Unknown error"}
            raise UpstreamError(response.status_code, details)

        return parse_page(payload)
