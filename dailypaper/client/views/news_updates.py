from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

import aiohttp

from dailypaper.catalog import NEWS_SOURCES
from dailypaper.client.api import ApiError
from dailypaper.client.formatting import format_time_ago
from dailypaper.client.pages import Page
from dailypaper.client.refresh import PeriodicTask
from dailypaper.client.views.base import View
from dailypaper.records import NewsArticle, utc_now

logger = logging.getLogger(__name__)


class NewsUpdatesView(View):
    """
    Live news list with a source filter and optional auto-refresh.

    Auto-refresh is on by default and lives only while the page is mounted.
    """

    page = Page.UPDATES

    sources = NEWS_SOURCES

    def __init__(self, app):
        super().__init__(app)
        self.articles: list[NewsArticle] = []
        self.selected_source = "all"
        self.auto_refresh = True
        self.last_update: datetime = utc_now()
        self._generation = 0
        self._refresher: Optional[PeriodicTask] = None

    async def mount(self) -> None:
        await self.fetch_news()
        if self.auto_refresh:
            self._start_refresher()

    async def unmount(self) -> None:
        await self._stop_refresher()

    async def fetch_news(self) -> None:
        # Responses for a source the user already left are dropped.
        self._generation += 1
        generation = self._generation
        source = self.selected_source
        self.loading = True
        try:
            articles = await self.app.api.get_news(self.session.access_token, source)
        except (ApiError, aiohttp.ClientError) as exc:
            logger.error("Error fetching news: %s", exc)
            return
        finally:
            if generation == self._generation:
                self.loading = False
        if generation != self._generation:
            return
        self.articles = articles
        self.last_update = utc_now()

    async def select_source(self, source_id: str) -> None:
        if source_id == self.selected_source:
            return
        self.selected_source = source_id
        await self.fetch_news()

    async def set_auto_refresh(self, enabled: bool) -> None:
        self.auto_refresh = enabled
        if enabled:
            self._start_refresher()
        else:
            await self._stop_refresher()

    @property
    def refreshing(self) -> bool:
        return self._refresher is not None and self._refresher.running

    def time_ago(self, article: NewsArticle, now: Optional[datetime] = None) -> str:
        return format_time_ago(article.published_at, now)

    async def back_to_dashboard(self) -> None:
        await self.go(Page.DASHBOARD)

    def _start_refresher(self) -> None:
        if self.refreshing:
            return
        self._refresher = PeriodicTask(
            self.app.settings.news_refresh_seconds,
            self.fetch_news,
            name="news-refresh",
        )
        self._refresher.start()

    async def _stop_refresher(self) -> None:
        refresher, self._refresher = self._refresher, None
        if refresher is not None:
            await refresher.stop()
