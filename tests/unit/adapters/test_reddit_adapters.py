"""Tests for the Reddit API and ScrapingBee adapters over a mocked transport."""

import json

import httpx
import pytest

from repshield.adapters.reddit.reddit_api_adapter import RedditAPIAdapter
from repshield.adapters.reddit.scrapingbee_adapter import ScrapingBeeClient, ScrapingBeeRedditAdapter
from repshield.domain.errors import (
    ProviderAuthError,
    ProviderNetworkError,
    ProviderRateLimitError,
    ScrapingServiceError,
)
from repshield.domain.value_objects.enums import Sentiment


def _listing(*items):
    return {"data": {"children": [{"data": d} for d in items]}}


POST = {
    "id": "abc",
    "title": "Acme is a scam",
    "selftext": "Avoid them",
    "subreddit": "scams",
    "author": "u1",
    "created_utc": 1_700_000_000,
    "score": 42,
    "num_comments": 3,
    "permalink": "/r/scams/comments/abc/acme/",
}
COMMENT = {
    "id": "c1",
    "body": "Acme support was great",
    "subreddit": "business",
    "author": "u2",
    "created_utc": 1_700_000_100,
    "score": 5,
    "permalink": "/r/business/comments/x/c1/",
    "link_title": "Vendors",
}


class RedditAPI:
    """Mock Reddit: token endpoint plus link/comment search."""

    def __init__(self, search_status=200, expires_in=3600):
        self.token_requests = 0
        self.search_requests = []
        self.search_status = search_status
        self.expires_in = expires_in

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/access_token":
            self.token_requests += 1
            return httpx.Response(
                200, json={"access_token": f"tok{self.token_requests}", "expires_in": self.expires_in}
            )
        self.search_requests.append(request)
        if self.search_status != 200:
            return httpx.Response(self.search_status, json={"error": self.search_status})
        if request.url.params["type"] == "link":
            return httpx.Response(200, json=_listing(POST))
        return httpx.Response(200, json=_listing(COMMENT))


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def _reddit(api, clock=None, **kwargs):
    return RedditAPIAdapter(
        client_id=kwargs.get("client_id", "id"),
        client_secret=kwargs.get("client_secret", "secret"),
        user_agent="RepShield/test",
        transport=httpx.MockTransport(api),
        clock=clock or Clock(),
    )


# ─── RedditAPIAdapter ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_reddit_search_maps_posts_and_comments():
    api = RedditAPI()
    result = await _reddit(api).search_brand("Acme")

    assert result.total_found == 2
    post = result.posts[0]
    assert post.title == "Acme is a scam"
    assert post.permalink == "https://reddit.com/r/scams/comments/abc/acme/"
    assert result.comments[0].link_title == "Vendors"
    assert result.risk_score > 0
    assert api.search_requests[0].headers["Authorization"] == "Bearer tok1"
    assert api.search_requests[0].url.params["q"] == '"Acme"'


@pytest.mark.asyncio
async def test_reddit_token_cached_until_expiry():
    api = RedditAPI(expires_in=3600)
    clock = Clock()
    adapter = _reddit(api, clock)

    await adapter.search_brand("Acme")
    await adapter.search_brand("Acme")
    assert api.token_requests == 1

    # refreshed one minute before Reddit's expiry
    clock.now = 3541
    await adapter.search_brand("Acme")
    assert api.token_requests == 2


@pytest.mark.asyncio
async def test_reddit_missing_credentials_is_auth_failure():
    adapter = _reddit(RedditAPI(), client_id="", client_secret="")
    with pytest.raises(ProviderAuthError, match="401"):
        await adapter.search_brand("Acme")


@pytest.mark.asyncio
async def test_reddit_401_drops_cached_token():
    api = RedditAPI(search_status=401)
    adapter = _reddit(api)
    with pytest.raises(ProviderAuthError):
        await adapter.search_brand("Acme")

    api.search_status = 200
    await adapter.search_brand("Acme")
    assert api.token_requests == 2


@pytest.mark.asyncio
async def test_reddit_rate_limit():
    with pytest.raises(ProviderRateLimitError):
        await _reddit(RedditAPI(search_status=429)).search_brand("Acme")


@pytest.mark.asyncio
async def test_reddit_reauthenticate_fetches_new_token():
    api = RedditAPI()
    adapter = _reddit(api)
    await adapter.search_brand("Acme")
    await adapter.reauthenticate()
    assert api.token_requests == 2


@pytest.mark.asyncio
async def test_reddit_transport_error_is_network_error():
    def down(request):
        raise httpx.ConnectError("connection refused", request=request)

    adapter = RedditAPIAdapter("id", "secret", "ua", transport=httpx.MockTransport(down))
    with pytest.raises(ProviderNetworkError):
        await adapter.search_brand("Acme")


# ─── ScrapingBee ────────────────────────────────────────────────────


class ScrapingBee:
    def __init__(self, search=None, comments=None, comments_status=200):
        self.requests = []
        self.search = search if search is not None else json.dumps(
            _listing(POST, {**POST, "id": "zzz", "title": "Unrelated", "selftext": "nothing here"})
        )
        self.comments = comments if comments is not None else json.dumps(
            _listing(COMMENT, {**COMMENT, "id": "c2", "body": "no brand"})
        )
        self.comments_status = comments_status

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        target = request.url.params["url"]
        if "search.json" in target:
            return httpx.Response(200, text=self.search)
        return httpx.Response(self.comments_status, text=self.comments)


def _bee(api, key="bee-key"):
    return ScrapingBeeRedditAdapter(ScrapingBeeClient(api_key=key, transport=httpx.MockTransport(api)))


@pytest.mark.asyncio
async def test_scrapingbee_filters_by_brand():
    api = ScrapingBee()
    result = await _bee(api).search_brand("acme")

    assert [p.id for p in result.posts] == ["abc"]
    assert [c.id for c in result.comments] == ["c1"]
    assert result.total_found == 2
    params = api.requests[0].url.params
    assert params["api_key"] == "bee-key"
    assert params["render_js"] == "false"
    assert params["premium_proxy"] == "true"


@pytest.mark.asyncio
async def test_scrapingbee_without_key():
    with pytest.raises(ScrapingServiceError):
        await _bee(ScrapingBee(), key="").search_brand("Acme")


@pytest.mark.asyncio
async def test_scrapingbee_comment_failure_keeps_posts():
    result = await _bee(ScrapingBee(comments_status=500)).search_brand("Acme")
    assert len(result.posts) == 1
    assert result.comments == []


@pytest.mark.asyncio
async def test_scrapingbee_unparseable_body_yields_nothing():
    result = await _bee(ScrapingBee(search="<html>blocked</html>", comments="{}")).search_brand("Acme")
    assert result.total_found == 0
    assert result.risk_score == 0
    assert result.sentiment == Sentiment.NEUTRAL


@pytest.mark.asyncio
async def test_scrapingbee_rejected_key_is_auth_failure():
    def forbidden(request):
        return httpx.Response(401, text="invalid api key")

    client = ScrapingBeeClient(api_key="bad", transport=httpx.MockTransport(forbidden))
    with pytest.raises(ProviderAuthError):
        await client.fetch("https://www.reddit.com/search.json")
