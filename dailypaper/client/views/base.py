from __future__ import annotations

from typing import TYPE_CHECKING

from dailypaper.client.pages import Page

if TYPE_CHECKING:
    from dailypaper.client.app import App


class View:
    """
    One page of the client.

    Views receive the router (for navigation and the shared clients) and
    read the signed-in state from ``app.session``. ``mount`` runs when the
    page is shown and ``unmount`` when it is left; anything started in one
    must be stopped in the other.
    """

    page: Page

    def __init__(self, app: "App"):
        self.app = app
        self.error = ""
        self.loading = False

    @property
    def session(self):
        return self.app.session

    async def mount(self) -> None:
        pass

    async def unmount(self) -> None:
        pass

    async def go(self, page: Page) -> None:
        await self.app.navigate(page)
