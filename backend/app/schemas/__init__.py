from app.schemas.search import (
    Author,
    CacheInfo,
    Metrics,
    PublicMetrics,
    ScoredResult,
    SearchRequest,
    SearchResponse,
    SearchWindow,
    UpstreamPage,
    UpstreamPost,
)

__all__ = [
    "Author",
    "CacheInfo",
    "Metrics",
    "PublicMetrics",
    "ScoredResult",
    "SearchRequest",
    "SearchResponse",
    "SearchWindow",
    "UpstreamPage",
    "UpstreamPost",
]
