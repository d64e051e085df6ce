"""RiskScoringPolicy: lexical provider scores and the composite 0-100 risk score."""

from __future__ import annotations

import time

from repshield.domain.entities.scan import ProviderSearchResult, WebScanResult
from repshield.domain.value_objects.enums import RiskLevel, Sentiment

NEGATIVE_KEYWORDS = [
    "scam", "fraud", "terrible", "awful", "horrible", "worst", "bad", "hate",
    "disgusting", "pathetic", "useless", "garbage", "trash", "fake", "lie",
    "cheat", "steal", "ripoff", "avoid", "warning", "danger",
]

POSITIVE_SENTIMENT_WORDS = ["great", "excellent", "amazing", "love", "good", "best", "awesome"]
NEGATIVE_SENTIMENT_WORDS = ["bad", "terrible", "awful", "hate", "worst", "horrible"]

HIGH_VISIBILITY_SUBREDDITS = frozenset({"entrepreneur", "business", "reviews", "scams"})

RECENT_WINDOW_SECONDS = 86400 * 7

# Composite weights
PROVIDER_SCORE_WEIGHT = 0.4
VOLUME_DIVISOR = 20
VOLUME_CAP = 2
VOLUME_WEIGHT = 15
RECENCY_WEIGHT = 20
VISIBILITY_WEIGHT = 25
WEB_NEGATIVE_WEIGHT = 30

HIGH_SCORE = 70
HIGH_VOLUME = 50
MEDIUM_SCORE = 40
MEDIUM_VOLUME = 20


def _words(texts: list[str]) -> list[str]:
    return [w for text in texts for w in (text or "").lower().split()]


def lexical_risk_score(texts: list[str]) -> int:
    """Share of words containing a negative keyword, scaled by 1000 and capped at 100.

    Substring match against every whitespace-separated word; a heuristic,
    not NLP.
    """
    words = _words(texts)
    if not words:
        return 0

    hits = sum(1 for w in words if any(neg in w for neg in NEGATIVE_KEYWORDS))
    return min(100, _round_half_up(hits / len(words) * 1000))


def lexical_sentiment(texts: list[str]) -> Sentiment:
    positive = 0
    negative = 0
    for w in _words(texts):
        if any(p in w for p in POSITIVE_SENTIMENT_WORDS):
            positive += 1
        if any(n in w for n in NEGATIVE_SENTIMENT_WORDS):
            negative += 1

    if negative > positive:
        return Sentiment.NEGATIVE
    if positive > negative:
        return Sentiment.POSITIVE
    return Sentiment.NEUTRAL


def calculate_risk_score(
    reddit: ProviderSearchResult | None,
    web: WebScanResult | None = None,
    now: float | None = None,
) -> int:
    """Combine provider signals into a 0-100 score.

    Terms:
      * provider lexical score × 0.4
      * volume: min(total_found / 20, 2) × 15
      * recency: share of posts from the last 7 days × 20
      * visibility: share of posts in high-visibility subreddits × 25
      * web: negative / total web mentions × 30
    """
    now = time.time() if now is None else now
    score = 0.0

    if reddit is not None:
        score += (reddit.risk_score or 0) * PROVIDER_SCORE_WEIGHT
        score += min(reddit.total_found / VOLUME_DIVISOR, VOLUME_CAP) * VOLUME_WEIGHT

        posts = reddit.posts
        if posts:
            recent = [p for p in posts if p.created_utc and now - p.created_utc < RECENT_WINDOW_SECONDS]
            score += len(recent) / len(posts) * RECENCY_WEIGHT

            visible = [
                p for p in posts
                if p.subreddit and p.subreddit.lower() in HIGH_VISIBILITY_SUBREDDITS
            ]
            score += len(visible) / len(posts) * VISIBILITY_WEIGHT

    if web is not None and web.total_mentions > 0:
        score += web.negative_mentions / web.total_mentions * WEB_NEGATIVE_WEIGHT

    return max(0, min(_round_half_up(score), 100))


def determine_risk_level(score: int, total_mentions: int) -> RiskLevel:
    """Tier on either axis: volume alone can force HIGH even with a mild score."""
    if score >= HIGH_SCORE or total_mentions >= HIGH_VOLUME:
        return RiskLevel.HIGH
    if score >= MEDIUM_SCORE or total_mentions >= MEDIUM_VOLUME:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def _round_half_up(value: float) -> int:
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)
