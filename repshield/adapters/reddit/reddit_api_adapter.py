"""Reddit API adapter: implements ScanProviderPort over OAuth client credentials."""

from __future__ import annotations

import logging
import time
from typing import Callable

import httpx

from repshield.adapters.provider_http import DEFAULT_TIMEOUT, check_response, network_error
from repshield.application.ports.scan_provider_port import ScanProviderPort
from repshield.config import settings
from repshield.domain.entities.scan import ProviderSearchResult, RedditComment, RedditPost
from repshield.domain.errors import ProviderAuthError
from repshield.domain.policies.risk_scoring import lexical_risk_score, lexical_sentiment

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
API_BASE = "https://oauth.reddit.com"
REDDIT_BASE = "https://reddit.com"
SEARCH_LIMIT = 100
# refresh the token one minute before Reddit says it expires
TOKEN_EXPIRY_MARGIN_SECONDS = 60


class RedditAPIAdapter(ScanProviderPort):
    """Searches posts and comments through the official Reddit API."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._client_id = client_id if client_id is not None else settings.reddit_client_id
        self._client_secret = client_secret if client_secret is not None else settings.reddit_client_secret
        self._user_agent = user_agent or settings.reddit_user_agent
        self._transport = transport
        self._timeout = timeout
        self._clock = clock
        self._access_token: str | None = None
        self._token_expiry = 0.0

    @property
    def configured(self) -> bool:
        return bool(self._client_id and self._client_secret and self._user_agent)

    async def search_brand(self, brand_name: str) -> ProviderSearchResult:
        async with self._client() as client:
            posts_data = await self._get(client, brand_name, "link")
            comments_data = await self._get(client, brand_name, "comment")

        posts = [self._to_post(c.get("data", {})) for c in _children(posts_data)]
        comments = [self._to_comment(c.get("data", {})) for c in _children(comments_data)]
        texts = [f"{p.title} {p.selftext}" for p in posts] + [c.body for c in comments]

        logger.info("Reddit API: %d posts, %d comments for '%s'", len(posts), len(comments), brand_name)
        return ProviderSearchResult(
            posts=posts,
            comments=comments,
            total_found=len(posts) + len(comments),
            risk_score=lexical_risk_score(texts),
            sentiment=lexical_sentiment(texts),
        )

    async def reauthenticate(self) -> None:
        self._access_token = None
        self._token_expiry = 0.0
        async with self._client() as client:
            await self._authenticate(client)

    # ─── HTTP ─────────────────────────────────────────────────────

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=self._timeout,
            headers={"User-Agent": self._user_agent},
        )

    async def _authenticate(self, client: httpx.AsyncClient) -> str:
        if self._access_token and self._clock() < self._token_expiry:
            return self._access_token
        if not self.configured:
            raise ProviderAuthError("Reddit API credentials not configured (401)")

        try:
            response = await client.post(
                TOKEN_URL,
                auth=(self._client_id, self._client_secret),
                data={"grant_type": "client_credentials"},
            )
        except httpx.TransportError as e:
            raise network_error("Reddit auth", e) from e

        check_response(response, "Reddit auth", ProviderAuthError)
        data = response.json()
        self._access_token = data["access_token"]
        self._token_expiry = self._clock() + float(data.get("expires_in", 3600)) - TOKEN_EXPIRY_MARGIN_SECONDS
        logger.debug("Reddit access token refreshed")
        return self._access_token

    async def _get(self, client: httpx.AsyncClient, brand_name: str, kind: str) -> dict:
        token = await self._authenticate(client)
        try:
            response = await client.get(
                f"{API_BASE}/search",
                params={"q": f'"{brand_name}"', "type": kind, "limit": SEARCH_LIMIT, "sort": "new"},
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.TransportError as e:
            raise network_error("Reddit API", e) from e

        if response.status_code == 401:
            # token revoked early; the next call authenticates again
            self._access_token = None
        check_response(response, "Reddit API")
        return response.json()

    # ─── Mapping ──────────────────────────────────────────────────

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
            permalink=_absolute(d.get("permalink") or ""),
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
            permalink=_absolute(d.get("permalink") or ""),
            link_title=d.get("link_title") or "Unknown",
        )


def _children(listing: dict) -> list[dict]:
    return (listing or {}).get("data", {}).get("children", []) or []


def _absolute(permalink: str) -> str:
    if not permalink or permalink.startswith("http"):
        return permalink
    return f"{REDDIT_BASE}{permalink}"
