from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from pydantic import ValidationError

from app.schemas.search import CacheInfo, SearchRequest, SearchResponse
from app.services.cache_keys import DEFAULT_NAMESPACE, DEFAULT_VERSION, build_cache_key
from app.services.cache_store import RestCacheStore
from app.services.query_builder import build_search_query
from app.services.scorer import EngagementScorer
from app.services.x_client import XSearchClient, index_authors

logger = logging.getLogger(__name__)


class SearchService:
    """Read-through cached keyword search over the X recent-search API.

    With ``caching_enabled`` off the store is never touched and responses
    carry no ``cache`` block.
    """

    def __init__(
        self,
        client: XSearchClient,
        cache_store: RestCacheStore | None = None,
        scorer: EngagementScorer | None = None,
        caching_enabled: bool = True,
        cache_ttl_seconds: int = 600,
        cache_namespace: str = DEFAULT_NAMESPACE,
        cache_key_version: str = DEFAULT_VERSION,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.client = client
        self.cache_store = cache_store
        self.scorer = scorer or EngagementScorer()
        self.caching_enabled = caching_enabled and cache_store is not None
        self.cache_ttl_seconds = cache_ttl_seconds
        self.cache_namespace = cache_namespace
        self.cache_key_version = cache_key_version
        self.clock = clock

    def cache_key_for(self, request: SearchRequest) -> str:
        return build_cache_key(
            request.keywords,
            request.window_hours,
            request.lang,
            namespace=self.cache_namespace,
            version=self.cache_key_version,
        )

    async def _cached_response(self, cache_key: str, max_results: int) -> SearchResponse | None:
        payload = await self.cache_store.get(cache_key)
        if payload is None or not isinstance(payload.get("results"), list):
            return None
        try:
            cached = SearchResponse.model_validate(payload)
        except ValidationError:
            logger.warning("Ignoring cache entry with unexpected shape")
            return None
        return cached.model_copy(
            update={
                "results": cached.results[:max_results],
                "cache": CacheInfo(hit=True, ttl_seconds=self.cache_ttl_seconds),
            }
        )

    async def search(self, request: SearchRequest) -> SearchResponse:
        cache_key = None
        if self.caching_enabled:
            cache_key = self.cache_key_for(request)
            cached = await self._cached_response(cache_key, request.max_results)
            if cached is not None:
                logger.info("Cache hit for %s", cache_key)
                return cached
            logger.debug("Cache miss for %s", cache_key)

        now = self.clock() if self.clock else None
        search_query = build_search_query(request, now)
        page = await self.client.search(search_query, request.credential)
        ranked = self.scorer.rank(page.posts, index_authors(page.users), request.max_results)

        response = SearchResponse(
            keywords=request.keywords,
            query=search_query.query,
            window=search_query.window,
            total_fetched=ranked.total_fetched,
            results=ranked.results,
        )
        if cache_key is None:
            return response

        response = response.model_copy(update={"cache": CacheInfo(hit=False, ttl_seconds=self.cache_ttl_seconds)})
        await self.cache_store.set(cache_key, response.cache_payload(), self.cache_ttl_seconds)
        return response
