from __future__ import annotations

from dataclasses import dataclass

from app.schemas.search import Author, Metrics, ScoredResult, UpstreamPost

PROFILE_STATUS_URL = "https://x.com/{username}/status/{post_id}"
GENERIC_STATUS_URL = "https://x.com/i/web/status/{post_id}"


@dataclass(frozen=True)
class RankedPosts:
    results: list[ScoredResult]
    total_fetched: int


class EngagementScorer:
    def __init__(self) -> None:
        self.weights = {
            "like": 1.0,
            "repost": 2.0,
            "reply": 1.5,
            "quote": 2.0,
        }

    def score(self, metrics: Metrics) -> float:
        return float(
            metrics.like * self.weights["like"]
            + metrics.repost * self.weights["repost"]
            + metrics.reply * self.weights["reply"]
            + metrics.quote * self.weights["quote"]
        )

    def link_for(self, post_id: str, username: str = "") -> str:
        if username:
            return PROFILE_STATUS_URL.format(username=username, post_id=post_id)
        return GENERIC_STATUS_URL.format(post_id=post_id)

    def score_post(self, post: UpstreamPost, authors: dict[str, Author]) -> ScoredResult:
        public = post.public_metrics
        metrics = Metrics(
            like=public.like_count,
            repost=public.retweet_count,
            reply=public.reply_count,
            quote=public.quote_count,
        )
        known = authors.get(post.author_id) if post.author_id else None
        author = Author(
            id=post.author_id,
            username=known.username if known else "",
            name=known.name if known else "",
        )
        return ScoredResult(
            id=post.id,
            text=post.text,
            created_at=post.created_at,
            lang=post.lang,
            author=author,
            metrics=metrics,
            score=self.score(metrics),
            link=self.link_for(post.id, author.username),
        )

    def rank(self, posts: list[UpstreamPost], authors: dict[str, Author], max_results: int) -> RankedPosts:
        scored = [self.score_post(post, authors) for post in posts]
        # sorted() is stable, so equal scores keep the upstream order.
        scored = sorted(scored, key=lambda result: result.score, reverse=True)
        return RankedPosts(results=scored[:max_results], total_fetched=len(scored))
