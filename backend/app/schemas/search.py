from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

WindowHours = Literal[1, 3, 6, 12, 24]
Lang = Literal["tr", "en"]


class SearchRequest(BaseModel):
    keywords: list[str] = Field(min_length=1, max_length=60)
    window_hours: WindowHours
    lang: Lang = "tr"
    max_results: int = Field(default=10, ge=1, le=50)
    credential: str = Field(repr=False)

    class Config:
        frozen = True


Count = int | float


class PublicMetrics(BaseModel):
    like_count: Count = 0
    retweet_count: Count = 0
    reply_count: Count = 0
    quote_count: Count = 0

    @field_validator("*", mode="before")
    @classmethod
    def _missing_counts_are_zero(cls, value):
        if value is None:
            return 0
        return value

    @field_validator("*")
    @classmethod
    def _non_negative(cls, value: Count) -> Count:
        return max(0, value)


class UpstreamPost(BaseModel):
    id: str
    text: str = ""
    created_at: str | None = None
    lang: str | None = None
    author_id: str | None = None
    public_metrics: PublicMetrics = PublicMetrics()

    @field_validator("text", mode="before")
    @classmethod
    def _blank_text(cls, value):
        return value if value is not None else ""

    @field_validator("public_metrics", mode="before")
    @classmethod
    def _default_metrics(cls, value):
        return value if value is not None else {}


class Author(BaseModel):
    id: str | None = None
    username: str = ""
    name: str = ""

    @field_validator("username", "name", mode="before")
    @classmethod
    def _blank_when_missing(cls, value):
        return value or ""


class UpstreamPage(BaseModel):
    posts: list[UpstreamPost] = []
    users: list[Author] = []


class Metrics(BaseModel):
    like: Count = 0
    repost: Count = 0
    reply: Count = 0
    quote: Count = 0


class ScoredResult(BaseModel):
    id: str
    text: str
    created_at: str | None = None
    lang: str | None = None
    author: Author
    metrics: Metrics
    score: float
    link: str

    class Config:
        frozen = True


class SearchWindow(BaseModel):
    start: str
    end: str


class CacheInfo(BaseModel):
    hit: bool
    ttl_seconds: int


class SearchResponse(BaseModel):
    keywords: list[str]
    query: str
    window: SearchWindow
    total_fetched: int
    results: list[ScoredResult]
    cache: CacheInfo | None = None

    def cache_payload(self) -> dict:
        """Serializable form written to the cache store, without hit metadata."""
        return self.model_dump(exclude={"cache"})
