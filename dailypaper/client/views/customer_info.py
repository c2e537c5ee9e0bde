from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import asdict, dataclass
from typing import Optional

import aiohttp

from dailypaper.client.api import ApiError
from dailypaper.client.pages import Page
from dailypaper.client.views.base import View

logger = logging.getLogger(__name__)


@dataclass
class CustomerInfoForm:
    full_name: str = ""
    telephone: str = ""
    address: str = ""
    plot_number: str = ""
    street_number: str = ""


class CustomerInfoView(View):
    """Delivery-address form; returns to the dashboard shortly after a save."""

    page = Page.CUSTOMER_INFO

    def __init__(self, app):
        super().__init__(app)
        self.form = CustomerInfoForm()
        self.success = False
        self._redirect: Optional[asyncio.Task] = None

    def update(self, **fields: str) -> None:
        for name, value in fields.items():
            if not hasattr(self.form, name):
                raise AttributeError(f"Unknown customer info field: {name}")
            setattr(self.form, name, value)

    async def submit(self) -> bool:
        self.error = ""
        self.loading = True
        try:
            await self.app.api.save_customer_info(
                self.session.access_token, **asdict(self.form)
            )
        except (ApiError, aiohttp.ClientError) as exc:
            logger.error("Error saving customer info: %s", exc)
            self.error = str(exc) or "Failed to save information. Please try again."
            return False
        finally:
            self.loading = False
        self.success = True
        self._redirect = asyncio.create_task(self._back_to_dashboard())
        return True

    async def _back_to_dashboard(self) -> None:
        await asyncio.sleep(self.app.settings.redirect_delay_seconds)
        await self.go(Page.DASHBOARD)

    async def cancel(self) -> None:
        await self.go(Page.DASHBOARD)

    async def unmount(self) -> None:
        # The redirect task itself triggers this unmount; never cancel it from inside.
        task, self._redirect = self._redirect, None
        if task is None or task is asyncio.current_task() or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
