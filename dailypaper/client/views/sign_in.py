from __future__ import annotations

import logging

import aiohttp

from dailypaper.client.auth import AuthError
from dailypaper.client.pages import Page
from dailypaper.client.views.base import View

logger = logging.getLogger(__name__)


class SignInView(View):
    page = Page.SIGN_IN

    async def submit(self, email: str, password: str) -> bool:
        """Exchange credentials for a session; on success the router shows the dashboard."""
        self.error = ""
        self.loading = True
        try:
            session = await self.app.auth.sign_in_with_password(email, password)
        except (AuthError, aiohttp.ClientError) as exc:
            logger.error("Sign in error: %s", exc)
            self.error = str(exc) or "Failed to sign in. Please check your credentials."
            return False
        finally:
            self.loading = False
        await self.app.sign_in(session.account, session.access_token)
        return True

    def sign_in_with_google(self) -> str:
        """Return the provider URL that completes a Google sign-in in the browser."""
        self.error = ""
        return self.app.auth.oauth_url("google", self.app.settings.oauth_redirect)

    async def open_sign_up(self) -> None:
        await self.go(Page.SIGN_UP)

    async def back_home(self) -> None:
        await self.go(Page.HOME)
