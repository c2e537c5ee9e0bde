"""
News aggregation over NewsAPI with a static fallback feed.

``NewsAggregator.fetch_news`` never raises: a missing API key, a failed
request or an unexpected payload all degrade to the fallback articles,
which share the live path's record shape.
"""

from __future__ import annotations

import logging
import time
from datetime import timedelta
from typing import Optional

import requests

from dailypaper.records import NewsArticle, to_iso, utc_now, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_NEWS_API_URL = "https://newsapi.org/v2/everything"
PAGE_SIZE = 20
PLACEHOLDER_IMAGE = (
    "https://images.unsplash.com/photo-1573812195421-50a396d17893?w=400"
)

REGION_QUERY = "Uganda"
SOCIAL_QUERY = "Uganda social media"

# (title, description, source, minutes before now)
FALLBACK_ARTICLES = (
    (
        "Uganda Economy Shows Strong Growth in Q4",
        "The latest economic reports indicate robust growth across multiple "
        "sectors, with agriculture and services leading the way.",
        "New Vision",
        15,
    ),
    (
        "Kampala Traffic Solutions Announced",
        "City officials unveil comprehensive plan to address traffic "
        "congestion in the capital with new infrastructure projects.",
        "Daily Monitor",
        45,
    ),
    (
        "Education Sector Receives Major Funding Boost",
        "Government announces significant investment in education "
        "infrastructure and teacher training programs nationwide.",
        "Daily Nation",
        90,
    ),
    (
        "Local Football Team Wins Regional Championship",
        "Celebrations erupt as the national team secures victory in the "
        "regional tournament finals.",
        "New Vision",
        120,
    ),
    (
        "Healthcare Initiative Launches Across Districts",
        "New mobile health clinics to provide essential services to rural "
        "communities starting next month.",
        "Daily Monitor",
        180,
    ),
    (
        "Technology Hub Opens in Central Business District",
        "State-of-the-art facility aims to support startups and innovation in "
        "the growing tech sector.",
        "Daily Nation",
        240,
    ),
)


def query_for_source(source: str) -> str:
    """Map a source filter onto a NewsAPI search term."""
    if source == "all":
        return REGION_QUERY
    if source == "social":
        return SOCIAL_QUERY
    return source


def generate_fallback_news(source: str = "all") -> list[NewsArticle]:
    """
    Build the static feed, newest first, filtered by source name.

    Args:
        source: ``"all"`` or a case-insensitive substring of the source name.
    """
    now = utc_now()
    stamp = int(time.time() * 1000)
    articles = [
        NewsArticle(
            id=f"{stamp}-{index}",
            title=title,
            description=description,
            source=source_name,
            url="#",
            published_at=to_iso(now - timedelta(minutes=minutes)),
            image=PLACEHOLDER_IMAGE,
        )
        for index, (title, description, source_name, minutes) in enumerate(
            FALLBACK_ARTICLES, start=1
        )
    ]
    if source != "all":
        needle = source.lower()
        articles = [a for a in articles if needle in a.source.lower()]
    return articles


def _map_remote_article(raw: dict, stamp: int, index: int) -> NewsArticle:
    source = raw.get("source") or {}
    return NewsArticle(
        id=f"{stamp}-{index}",
        title=raw.get("title") or "No title",
        description=raw.get("description") or "No description available",
        source=source.get("name") or "Unknown Source",
        url=raw.get("url") or "#",
        published_at=raw.get("publishedAt") or utc_now_iso(),
        image=raw.get("urlToImage") or PLACEHOLDER_IMAGE,
    )


class NewsAggregator:
    """Fetches articles from NewsAPI when a key is configured."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        api_url: str = DEFAULT_NEWS_API_URL,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.timeout = timeout
        self._session = session or requests.Session()

    @property
    def live(self) -> bool:
        return bool(self.api_key)

    def fetch_news(self, source: str = "all") -> list[NewsArticle]:
        source = source or "all"
        if not self.live:
            return generate_fallback_news(source)
        try:
            return self._fetch_remote(source)
        except Exception as exc:
            logger.exception("NewsAPI error: %s", exc)
            return generate_fallback_news(source)

    def _fetch_remote(self, source: str) -> list[NewsArticle]:
        response = self._session.get(
            self.api_url,
            params={
                "q": query_for_source(source),
                "language": "en",
                "sortBy": "publishedAt",
                "pageSize": PAGE_SIZE,
                "apiKey": self.api_key,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        payload = response.json()
        stamp = int(time.time() * 1000)
        return [
            _map_remote_article(raw, stamp, index)
            for index, raw in enumerate(payload.get("articles") or [])
        ]
