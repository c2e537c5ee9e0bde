from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from dailypaper.catalog import NEWSPAPERS, PLANS, SINGLE_PAPER_PLANS
from dailypaper.client.api import ApiError
from dailypaper.client.pages import Page
from dailypaper.client.views.base import View
from dailypaper.records import CustomerInfo, Subscription

logger = logging.getLogger(__name__)


class DashboardView(View):
    """
    Account overview: delivery details, current subscription and the plan picker.

    The subscription shown is always the server's copy; picking a plan only
    changes local selection until ``subscribe`` returns.
    """

    page = Page.DASHBOARD

    plans = list(PLANS.values())
    newspapers = NEWSPAPERS

    def __init__(self, app):
        super().__init__(app)
        self.customer_info: Optional[CustomerInfo] = None
        self.subscription: Optional[Subscription] = None
        self.selected_plan = ""
        self.selected_newspaper = ""
        self.subscribing = False

    @property
    def account(self):
        return self.session.account

    async def mount(self) -> None:
        self.loading = True
        token = self.session.access_token
        try:
            info, subscription = await asyncio.gather(
                self.app.api.get_customer_info(token),
                self.app.api.get_subscription(token),
                return_exceptions=True,
            )
        finally:
            self.loading = False
        self.customer_info = self._settled(info, "customer info")
        self.subscription = self._settled(subscription, "subscription")

    @staticmethod
    def _settled(result, label: str):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            logger.error("Error fetching %s: %s", label, result)
            return None
        return result

    def select_plan(self, plan_id: str) -> None:
        if plan_id not in PLANS:
            raise ValueError(f"Unknown plan: {plan_id}")
        self.selected_plan = plan_id
        if plan_id not in SINGLE_PAPER_PLANS:
            self.selected_newspaper = ""

    def select_newspaper(self, name: str) -> None:
        self.selected_newspaper = name

    @property
    def can_subscribe(self) -> bool:
        if not self.selected_plan or self.subscribing:
            return False
        if self.selected_plan in SINGLE_PAPER_PLANS and not self.selected_newspaper:
            return False
        return True

    async def subscribe(self) -> bool:
        if not self.can_subscribe:
            return False
        self.error = ""
        self.subscribing = True
        try:
            self.subscription = await self.app.api.subscribe(
                self.session.access_token,
                self.selected_plan,
                self.selected_newspaper or None,
            )
        except (ApiError, aiohttp.ClientError) as exc:
            logger.error("Error subscribing: %s", exc)
            self.error = str(exc) or "Failed to subscribe"
            return False
        finally:
            self.subscribing = False
        self.selected_plan = ""
        self.selected_newspaper = ""
        return True

    async def edit_customer_info(self) -> None:
        await self.go(Page.CUSTOMER_INFO)

    async def open_updates(self) -> None:
        await self.go(Page.UPDATES)

    async def sign_out(self):
        return await self.app.sign_out()
