from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

from app.schemas.search import SearchRequest, SearchWindow

EXCLUDE_REPOSTS = "-is:retweet"


@dataclass(frozen=True)
class SearchQuery:
    query: str
    window: SearchWindow


def quote_keyword(keyword: str) -> str:
    escaped = keyword.replace('"', '\\"')
    return f'("{escaped}")'


def build_query_string(keywords: Iterable[str], lang: str) -> str:
    disjunction = " OR ".join(quote_keyword(keyword) for keyword in keywords)
    if not disjunction:
        raise ValueError("at least one keyword is required to build a query")
    return f"({disjunction}) {EXCLUDE_REPOSTS} lang:{lang}"


def format_timestamp(moment: datetime) -> str:
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_time_window(window_hours: int, now: datetime | None = None) -> SearchWindow:
    end = now or datetime.now(timezone.utc)
    start = end - timedelta(hours=window_hours)
    return SearchWindow(start=format_timestamp(start), end=format_timestamp(end))


def build_search_query(request: SearchRequest, now: datetime | None = None) -> SearchQuery:
    return SearchQuery(
        query=build_query_string(request.keywords, request.lang),
        window=build_time_window(request.window_hours, now),
    )
