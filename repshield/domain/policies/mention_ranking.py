"""MentionRankingPolicy: pick preview mentions from provider output."""

from __future__ import annotations

import time

from repshield.domain.entities.scan import Mention, ProviderSearchResult
from repshield.domain.value_objects.enums import MentionType

EXCERPT_LENGTH = 150
RECENCY_TIEBREAK_PER_SECOND = 0.001
REDDIT_BASE_URL = "https://reddit.com"


def _absolute_url(permalink: str) -> str:
    if permalink.startswith("http://") or permalink.startswith("https://"):
        return permalink
    return f"{REDDIT_BASE_URL}{permalink}"


def build_mentions(result: ProviderSearchResult, now: float | None = None) -> list[Mention]:
    now = time.time() if now is None else now
    mentions = [
        Mention(
            type=MentionType.POST,
            subreddit=p.subreddit or "unknown",
            content=f"{p.title or ''} {(p.selftext or '')[:EXCERPT_LENGTH]}",
            score=p.score or 0,
            url=_absolute_url(p.permalink or ""),
            created=p.created_utc or now,
        )
        for p in result.posts
    ]
    mentions.extend(
        Mention(
            type=MentionType.COMMENT,
            subreddit=c.subreddit or "unknown",
            content=(c.body or "")[:EXCERPT_LENGTH],
            score=c.score or 0,
            url=_absolute_url(c.permalink or ""),
            created=c.created_utc or now,
        )
        for c in result.comments
    )
    return mentions


def rank_mentions(mentions: list[Mention]) -> list[Mention]:
    """Sort by |score| descending; recency only breaks near-ties (0.001 per second)."""
    return sorted(
        mentions,
        key=lambda m: abs(m.score) + m.created * RECENCY_TIEBREAK_PER_SECOND,
        reverse=True,
    )


def extract_top_mentions(
    result: ProviderSearchResult | None, limit: int, now: float | None = None
) -> list[Mention]:
    if result is None or limit <= 0:
        return []
    return rank_mentions(build_mentions(result, now))[:limit]
