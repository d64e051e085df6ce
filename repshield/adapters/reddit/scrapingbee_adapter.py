"""ScrapingBee adapters: public Reddit JSON fetched through the ScrapingBee proxy.

``ScrapingBeeClient`` is also used by the web platforms adapter.
"""

from __future__ import annotations

import json
import logging

import httpx

from repshield.adapters.provider_http import DEFAULT_TIMEOUT, check_response, network_error
from repshield.application.ports.scan_provider_port import ScanProviderPort
from repshield.config import settings
from repshield.domain.entities.scan import ProviderSearchResult, RedditComment, RedditPost
from repshield.domain.errors import ProviderError, ScrapingServiceError
from repshield.domain.policies.risk_scoring import lexical_risk_score, lexical_sentiment

logger = logging.getLogger(__name__)

SCRAPINGBEE_URL = "https://app.scrapingbee.com/api/v1/"
REDDIT_SEARCH_URL = "https://www.reddit.com/search.json"
REDDIT_COMMENTS_URL = "https://www.reddit.com/r/all/comments.json"
FETCH_LIMIT = 50


class ScrapingBeeClient:
    def __init__(
        self,
        api_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._api_key = api_key if api_key is not None else settings.scrapingbee_api_key
        self._transport = transport
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    async def fetch(self, url: str, premium_proxy: bool = True) -> str:
        """Fetch *url* through ScrapingBee and return the raw body."""
        if not self._api_key:
            raise ScrapingServiceError("ScrapingBee API key not configured")

        params = {"api_key": self._api_key, "url": url, "render_js": "false"}
        if premium_proxy:
            params["premium_proxy"] = "true"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.get(SCRAPINGBEE_URL, params=params)
        except httpx.TransportError as e:
            raise network_error("ScrapingBee", e) from e

        check_response(response, "ScrapingBee", ScrapingServiceError)
        return response.text


class ScrapingBeeRedditAdapter(ScanProviderPort):
    """Quick-scan provider: recent Reddit posts and comments filtered by brand."""

    def __init__(self, client: ScrapingBeeClient | None = None):
        self._client = client or ScrapingBeeClient()

    async def search_brand(self, brand_name: str) -> ProviderSearchResult:
        if not self._client.configured:
            raise ScrapingServiceError("ScrapingBee API key required for Reddit scanning")

        needle = brand_name.lower()
        search_url = str(
            httpx.URL(REDDIT_SEARCH_URL, params={"q": f'"{brand_name}"', "sort": "new", "limit": FETCH_LIMIT})
        )
        posts = [
            p for p in (self._to_post(d) for d in self._listing(await self._client.fetch(search_url), "search"))
            if needle in p.title.lower() or needle in p.selftext.lower()
        ]

        comments: list[RedditComment] = []
        try:
            body = await self._client.fetch(f"{REDDIT_COMMENTS_URL}?limit={FETCH_LIMIT}")
            comments = [
                c for c in (self._to_comment(d) for d in self._listing(body, "comments"))
                if needle in c.body.lower()
            ]
        except ProviderError as e:
            logger.warning("ScrapingBee comment fetch failed: %s", e)

        texts = [f"{p.title} {p.selftext}" for p in posts] + [c.body for c in comments]
        logger.info("ScrapingBee: found %d mentions for '%s'", len(posts) + len(comments), brand_name)
        return ProviderSearchResult(
            posts=posts,
            comments=comments,
            total_found=len(posts) + len(comments),
            risk_score=lexical_risk_score(texts),
            sentiment=lexical_sentiment(texts),
        )

    @staticmethod
    def _listing(body: str, what: str) -> list[dict]:
        try:
            data = json.loads(body)
        except ValueError:
            logger.error("Error parsing Reddit %s results from ScrapingBee", what)
            return []
        children = (data.get("data") or {}).get("children") or [] if isinstance(data, dict) else []
        return [c.get("data") or {} for c in children]

    @staticmethod
    def _to_post(d: dict) -> RedditPost:
        return RedditPost(
            id=d.get("id", ""),
            title=d.get("title") or "",
            selftext=d.get("selftext") or "",
            url=d.get("url") or "",
            subreddit=d.get("subreddit") or "",
            author=d.get("author") or "",
            created_utc=float(d.get("created_utc") or 0),
            score=int(d.get("score") or 0),
            num_comments=int(d.get("num_comments") or 0),
            permalink=d.get("permalink") or "",
        )

    @staticmethod
    def _to_comment(d: dict) -> RedditComment:
        return RedditComment(
            id=d.get("id", ""),
            body=d.get("body") or "",
            author=d.get("author") or "",
            subreddit=d.get("subreddit") or "",
            created_utc=float(d.get("created_utc") or 0),
            score=int(d.get("score") or 0),
            permalink=d.get("permalink") or "",
            link_title=d.get("link_title") or "",
        )
