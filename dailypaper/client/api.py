"""
Async REST client for the Daily Paper API.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from dailypaper.records import CustomerInfo, NewsArticle, Subscription

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Failed API call, carrying the response's ``error`` message.

    ``status`` is 0 when no response arrived before the timeout.
    """

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class ApiClient:
    """
    Thin wrapper over the REST surface.

    Reads that answer 404 return ``None`` so views can render an empty
    state; error responses and timeouts raise ``ApiError``.
    """

    def __init__(self, base_url: str, *, timeout: float = 15.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self):
        self._session = aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    def _http(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def _request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> tuple[int, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            async with self._http().request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                json=json,
                params=params,
            ) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = None
                return response.status, body
        except asyncio.TimeoutError as exc:
            logger.warning("%s %s timed out after %ss", method, path, self.timeout)
            raise ApiError(0, "Request timed out") from exc

    @staticmethod
    def _raise_for(status: int, body: Any, fallback: str) -> None:
        if 200 <= status < 300:
            return
        message = body.get("error") if isinstance(body, dict) else None
        raise ApiError(status, message or fallback)

    async def signup(self, email: str, password: str, name: str) -> dict:
        status, body = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "name": name},
        )
        self._raise_for(status, body, "Sign up failed")
        return body["user"]

    async def get_customer_info(self, token: str) -> Optional[CustomerInfo]:
        status, body = await self._request("GET", "/customer-info", token=token)
        if status == 404:
            return None
        self._raise_for(status, body, "Failed to load customer information")
        return CustomerInfo.from_dict(body)

    async def save_customer_info(
        self,
        token: str,
        *,
        full_name: str,
        telephone: str,
        address: str,
        plot_number: str,
        street_number: str,
    ) -> CustomerInfo:
        status, body = await self._request(
            "POST",
            "/customer-info",
            token=token,
            json={
                "fullName": full_name,
                "telephone": telephone,
                "address": address,
                "plotNumber": plot_number,
                "streetNumber": street_number,
            },
        )
        self._raise_for(status, body, "Failed to save customer information")
        return CustomerInfo.from_dict(body["data"])

    async def get_subscription(self, token: str) -> Optional[Subscription]:
        status, body = await self._request("GET", "/subscription", token=token)
        if status == 404:
            return None
        self._raise_for(status, body, "Failed to load subscription")
        return Subscription.from_dict(body)

    async def subscribe(
        self, token: str, plan: str, newspaper: Optional[str] = None
    ) -> Subscription:
        status, body = await self._request(
            "POST",
            "/subscription",
            token=token,
            json={"plan": plan, "newspaper": newspaper or None},
        )
        self._raise_for(status, body, "Failed to subscribe")
        return Subscription.from_dict(body)

    async def get_news(self, token: str, source: str = "all") -> list[NewsArticle]:
        status, body = await self._request(
            "GET", "/news", token=token, params={"source": source}
        )
        self._raise_for(status, body, "Failed to load news")
        return [NewsArticle.from_dict(item) for item in body.get("articles") or []]

    async def health(self) -> dict:
        status, body = await self._request("GET", "/health")
        self._raise_for(status, body, "Health check failed")
        return body
