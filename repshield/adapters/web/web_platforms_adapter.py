"""Web platforms adapter: review sites and news scraped through ScrapingBee."""

from __future__ import annotations

import asyncio
import html
import logging
import re
from urllib.parse import quote_plus

from repshield.adapters.reddit.scrapingbee_adapter import ScrapingBeeClient
from repshield.application.ports.scan_provider_port import WebScanProviderPort
from repshield.domain.entities.scan import WebScanResult
from repshield.domain.errors import ScrapingServiceError
from repshield.domain.policies.risk_scoring import lexical_sentiment
from repshield.domain.value_objects.enums import Sentiment

logger = logging.getLogger(__name__)

SOURCES: dict[str, str] = {
    "trustpilot": "https://www.trustpilot.com/search?query={q}",
    "g2": "https://www.g2.com/search?query={q}",
    "capterra": "https://www.capterra.com/search/?query={q}",
    "news": "https://news.google.com/search?q={q}&hl=en-US&gl=US",
}

SNIPPET_PATTERNS = [
    re.compile(r'<div[^>]*class="[^"]*review[^"]*"[^>]*>(.*?)</div>', re.IGNORECASE),
    re.compile(r'<p[^>]*class="[^"]*comment[^"]*"[^>]*>(.*?)</p>', re.IGNORECASE),
    re.compile(r'<span[^>]*class="[^"]*text[^"]*"[^>]*>(.*?)</span>', re.IGNORECASE),
]
TAG_RE = re.compile(r"<[^>]*>")
MIN_SNIPPET_LENGTH = 20
MAX_SNIPPETS_PER_SOURCE = 10


def extract_snippets(page: str) -> list[str]:
    """Visible text of review/comment-like elements, at most 10 per page."""
    snippets: list[str] = []
    for pattern in SNIPPET_PATTERNS:
        for match in pattern.findall(page):
            text = html.unescape(TAG_RE.sub("", match)).strip()
            if len(text) > MIN_SNIPPET_LENGTH:
                snippets.append(text)
    return snippets[:MAX_SNIPPETS_PER_SOURCE]


class WebPlatformsAdapter(WebScanProviderPort):
    def __init__(self, client: ScrapingBeeClient | None = None):
        self._client = client or ScrapingBeeClient()

    async def scan(self, brand_name: str, platforms: list[str]) -> WebScanResult:
        if not self._client.configured:
            raise ScrapingServiceError("ScrapingBee API key not configured")

        names = [n for n in SOURCES if n in {p.lower() for p in platforms}] or list(SOURCES)
        pages = await asyncio.gather(
            *(self._client.fetch(SOURCES[n].format(q=quote_plus(brand_name))) for n in names),
            return_exceptions=True,
        )

        total = 0
        negative = 0
        sources: list[str] = []
        for name, page in zip(names, pages):
            if isinstance(page, BaseException):
                logger.warning("Web source %s failed for '%s': %s", name, brand_name, page)
                continue
            snippets = extract_snippets(page)
            sources.append(name)
            total += len(snippets)
            negative += sum(1 for s in snippets if lexical_sentiment([s]) == Sentiment.NEGATIVE)

        if not sources:
            raise ScrapingServiceError(f"All web sources failed for '{brand_name}'")

        logger.info(
            "Web scan for '%s': %d mentions (%d negative) from %s",
            brand_name, total, negative, ", ".join(sources),
        )
        return WebScanResult(total_mentions=total, negative_mentions=negative, sources=sources)
