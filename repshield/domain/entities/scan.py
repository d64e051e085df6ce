"""Scan entities: provider output, preview mentions and the unified scan result."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

from repshield.domain.value_objects.enums import (
    MentionType,
    RiskLevel,
    ScanPriority,
    Sentiment,
)


@dataclass
class RedditPost:
    id: str
    title: str
    selftext: str
    subreddit: str
    author: str
    created_utc: float
    score: int
    num_comments: int = 0
    url: str = ""
    permalink: str = ""


@dataclass
class RedditComment:
    id: str
    body: str
    subreddit: str
    author: str
    created_utc: float
    score: int
    permalink: str = ""
    link_title: str = ""


@dataclass
class ProviderSearchResult:
    """Raw output of a mention-search provider."""

    posts: list[RedditPost]
    comments: list[RedditComment]
    total_found: int
    risk_score: float
    sentiment: Sentiment

    def to_dict(self) -> dict:
        data = asdict(self)
        data["sentiment"] = self.sentiment.value
        return data


@dataclass
class WebScanResult:
    total_mentions: int
    negative_mentions: int
    sources: list[str]


@dataclass
class Mention:
    type: MentionType
    subreddit: str
    content: str
    score: int
    url: str
    created: float

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "subreddit": self.subreddit,
            "content": self.content,
            "score": self.score,
            "url": self.url,
            "created": self.created,
        }


@dataclass
class ScanRequest:
    brand_name: str
    priority: ScanPriority
    platforms: list[str] = field(default_factory=lambda: ["reddit"])
    user_email: str | None = None


@dataclass
class RedditPlatformSummary:
    posts: int
    comments: int
    sentiment: Sentiment
    top_mentions: list[Mention]


@dataclass
class WebPlatformSummary:
    mentions: int
    sources: list[str]


@dataclass
class ScanResult:
    scan_id: str
    brand_name: str
    total_mentions: int
    risk_level: RiskLevel
    risk_score: int
    reddit: RedditPlatformSummary
    processing_time: int
    next_steps: list[str]
    web: WebPlatformSummary | None = None
    ticket_id: int | None = None

    def to_dict(self) -> dict:
        """camelCase representation used by the HTTP API and ticket request data."""
        platforms: dict = {
            "reddit": {
                "posts": self.reddit.posts,
                "comments": self.reddit.comments,
                "sentiment": self.reddit.sentiment.value,
                "topMentions": [m.to_dict() for m in self.reddit.top_mentions],
            }
        }
        if self.web is not None:
            platforms["web"] = {
                "mentions": self.web.mentions,
                "sources": list(self.web.sources),
            }
        return {
            "scanId": self.scan_id,
            "brandName": self.brand_name,
            "totalMentions": self.total_mentions,
            "riskLevel": self.risk_level.value,
            "riskScore": self.risk_score,
            "platforms": platforms,
            "ticketId": self.ticket_id,
            "processingTime": self.processing_time,
            "nextSteps": list(self.next_steps),
        }


@dataclass
class ScanSession:
    """Short-lived follow-up cache entry for a finished scan."""

    result: ScanResult
    full_data: dict
    timestamp: float
