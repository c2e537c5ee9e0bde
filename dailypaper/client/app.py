"""
Page router for the client application.
"""

from __future__ import annotations

import logging
from typing import Optional, assert_never

import aiohttp

from dailypaper.client.api import ApiClient
from dailypaper.client.auth import AuthClient, AuthError
from dailypaper.client.config import ClientSettings, get_client_settings
from dailypaper.client.pages import Page
from dailypaper.client.session import SessionContext
from dailypaper.client.views import (
    CustomerInfoView,
    DashboardView,
    HomeView,
    NewsUpdatesView,
    SignInView,
    SignUpView,
    View,
)
from dailypaper.records import Account

logger = logging.getLogger(__name__)

# Pages that need a signed-in session; navigating to them signed out lands on sign-in.
PROTECTED_PAGES = frozenset({Page.CUSTOMER_INFO, Page.DASHBOARD, Page.UPDATES})


class App:
    """
    Holds the current page and its view, and owns the session lifecycle.

    Only one view is mounted at a time: ``navigate`` unmounts the current
    view (cancelling its timers) before mounting the next.
    """

    def __init__(
        self,
        api: ApiClient,
        auth: AuthClient,
        *,
        session: Optional[SessionContext] = None,
        settings: Optional[ClientSettings] = None,
    ):
        self.api = api
        self.auth = auth
        self.session = session or SessionContext()
        self.settings = settings or get_client_settings()
        self.page = Page.HOME
        self.view: View = HomeView(self)

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> "App":
        settings = settings or get_client_settings()
        if not settings.auth_url or not settings.anon_key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY are required")
        api = ApiClient(settings.api_url, timeout=settings.request_timeout)
        auth = AuthClient(
            settings.auth_url,
            settings.anon_key,
            session_file=settings.session_file,
            timeout=settings.request_timeout,
        )
        return cls(api, auth, settings=settings)

    def build_view(self, page: Page) -> View:
        match page:
            case Page.HOME:
                return HomeView(self)
            case Page.SIGN_IN:
                return SignInView(self)
            case Page.SIGN_UP:
                return SignUpView(self)
            case Page.CUSTOMER_INFO:
                return CustomerInfoView(self)
            case Page.DASHBOARD:
                return DashboardView(self)
            case Page.UPDATES:
                return NewsUpdatesView(self)
            case _:
                assert_never(page)

    async def navigate(self, page: Page) -> View:
        if page in PROTECTED_PAGES and not self.session.is_authenticated:
            logger.info("Not signed in, redirecting %s to sign-in", page.value)
            page = Page.SIGN_IN
        previous = self.view
        await previous.unmount()
        self.page = page
        self.view = self.build_view(page)
        await self.view.mount()
        return self.view

    async def start(self) -> View:
        """Restore a persisted session, landing on the dashboard when one exists."""
        try:
            restored = await self.auth.get_session()
        except (AuthError, aiohttp.ClientError) as exc:
            logger.warning("Could not restore session: %s", exc)
            restored = None
        if restored is not None:
            self.session.populate(restored.account, restored.access_token)
            return await self.navigate(Page.DASHBOARD)
        await self.view.mount()
        return self.view

    async def sign_in(self, account: Account, access_token: str) -> View:
        self.session.populate(account, access_token)
        return await self.navigate(Page.DASHBOARD)

    async def sign_out(self) -> View:
        if self.session.access_token:
            await self.auth.sign_out(self.session.access_token)
        self.session.clear()
        return await self.navigate(Page.HOME)

    async def close(self) -> None:
        await self.view.unmount()
        await self.api.close()
        await self.auth.close()
