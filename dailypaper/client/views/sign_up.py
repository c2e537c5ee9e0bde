from __future__ import annotations

import logging

import aiohttp

from dailypaper.client.api import ApiError
from dailypaper.client.auth import AuthError
from dailypaper.client.pages import Page
from dailypaper.client.views.base import View

logger = logging.getLogger(__name__)


class SignUpView(View):
    page = Page.SIGN_UP

    async def submit(self, name: str, email: str, password: str) -> bool:
        """
        Register through the API, then sign in with the same credentials.

        Returns True once the router has switched to the dashboard.
        """
        self.error = ""
        self.loading = True
        try:
            await self.app.api.signup(email, password, name)
            session = await self.app.auth.sign_in_with_password(email, password)
        except (ApiError, AuthError, aiohttp.ClientError) as exc:
            logger.error("Sign up error: %s", exc)
            self.error = str(exc) or "Failed to sign up. Please try again."
            return False
        finally:
            self.loading = False
        await self.app.sign_in(session.account, session.access_token)
        return True

    def sign_up_with_google(self) -> str:
        self.error = ""
        return self.app.auth.oauth_url("google", self.app.settings.oauth_redirect)

    async def open_sign_in(self) -> None:
        await self.go(Page.SIGN_IN)

    async def back_home(self) -> None:
        await self.go(Page.HOME)
