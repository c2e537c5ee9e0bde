"""
Async client for the hosted identity provider (GoTrue REST API).

Handles the parts of auth the API never sees: password sign-in, OAuth
redirects, token refresh, sign-out and the persisted session file.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional
from urllib.parse import urlencode

import aiohttp

from dailypaper.records import Account

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """The identity provider rejected a sign-in or session request."""


@dataclass
class AuthSession:
    access_token: str
    refresh_token: str
    expires_at: float
    account: Account

    @property
    def expired(self) -> bool:
        return time.time() >= self.expires_at

    def as_dict(self) -> dict:
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at,
            "user": self.account.as_dict(),
        }

    @classmethod
    def from_token_response(cls, payload: dict) -> "AuthSession":
        expires_at = payload.get("expires_at")
        if expires_at is None:
            expires_at = time.time() + float(payload.get("expires_in") or 3600)
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token") or "",
            expires_at=float(expires_at),
            account=Account.from_provider(payload["user"]),
        )


class SessionFile:
    """JSON file holding the last session so a restart can skip sign-in."""

    def __init__(self, path: Optional[Path]):
        self.path = path

    def load(self) -> Optional[AuthSession]:
        if self.path is None or not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return AuthSession.from_token_response(payload)
        except (ValueError, KeyError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, exc)
            return None

    def save(self, session: AuthSession) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(session.as_dict()), encoding="utf-8")

    def clear(self) -> None:
        if self.path is not None and self.path.exists():
            self.path.unlink()


def _error_message(body: Any, fallback: str) -> str:
    if isinstance(body, dict):
        for key in ("error_description", "msg", "message", "error"):
            if body.get(key):
                return str(body[key])
    return fallback


class AuthClient:
    def __init__(
        self,
        url: str,
        anon_key: str,
        *,
        session_file: Optional[Path] = None,
        timeout: float = 15.0,
    ):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.session_file = SessionFile(session_file)
        self.timeout = timeout
        self._http_session: aiohttp.ClientSession | None = None

    async def __aenter__(self):
        self._http()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._http_session:
            await self._http_session.close()
            self._http_session = None

    def _http(self) -> aiohttp.ClientSession:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession(
                headers={"apikey": self.anon_key},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._http_session

    async def _send(self, method: str, path: str, **kwargs) -> tuple[int, Any]:
        try:
            async with self._http().request(
                method, f"{self.url}{path}", **kwargs
            ) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
                return response.status, body
        except asyncio.TimeoutError as exc:
            logger.warning("%s %s timed out after %ss", method, path, self.timeout)
            raise AuthError("Request timed out") from exc

    async def _token_grant(self, grant_type: str, payload: dict) -> AuthSession:
        status, body = await self._send(
            "POST",
            "/auth/v1/token",
            params={"grant_type": grant_type},
            json=payload,
        )
        if status >= 400 or not isinstance(body, dict):
            raise AuthError(_error_message(body, "Failed to sign in"))
        session = AuthSession.from_token_response(body)
        self.session_file.save(session)
        return session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        return await self._token_grant(
            "password", {"email": email, "password": password}
        )

    async def refresh(self, refresh_token: str) -> AuthSession:
        return await self._token_grant("refresh_token", {"refresh_token": refresh_token})

    def oauth_url(self, provider: str = "google", redirect_to: Optional[str] = None) -> str:
        """URL the user opens in a browser to sign in with an OAuth provider."""
        params = {"provider": provider}
        if redirect_to:
            params["redirect_to"] = redirect_to
        return f"{self.url}/auth/v1/authorize?{urlencode(params)}"

    async def get_user(self, access_token: str) -> Account:
        status, body = await self._send(
            "GET",
            "/auth/v1/user",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        if status >= 400 or not isinstance(body, dict):
            raise AuthError(_error_message(body, "Unauthorized"))
        return Account.from_provider(body)

    async def get_session(self) -> Optional[AuthSession]:
        """
        Restore the persisted session, refreshing it when the token expired.

        Returns None (and forgets the file) when nothing usable is stored.
        """
        session = self.session_file.load()
        if session is None:
            return None
        try:
            if session.expired and session.refresh_token:
                return await self.refresh(session.refresh_token)
            session.account = await self.get_user(session.access_token)
            return session
        except (AuthError, aiohttp.ClientError) as exc:
            logger.info("Stored session is no longer valid: %s", exc)
            self.session_file.clear()
            return None

    async def sign_out(self, access_token: str) -> None:
        try:
            status, _ = await self._send(
                "POST",
                "/auth/v1/logout",
                headers={"Authorization": f"Bearer {access_token}"},
            )
            if status >= 400:
                logger.warning("Logout returned %d", status)
        except (AuthError, aiohttp.ClientError) as exc:
            logger.warning("Logout request failed: %s", exc)
        finally:
            self.session_file.clear()
