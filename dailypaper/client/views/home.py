from __future__ import annotations

from dailypaper.catalog import NEWSPAPERS, PLANS
from dailypaper.client.pages import Page
from dailypaper.client.views.base import View

HEADLINE = "Your Daily News, Delivered Fresh"
TAGLINE = (
    "Subscribe to Uganda's leading newspapers and get them delivered to your "
    "doorstep every morning."
)
FEATURES = (
    ("Reliable Delivery", "Fresh newspapers at your doorstep every morning"),
    ("On Time", "Delivered before 7 AM, guaranteed"),
    ("Flexible Plans", "Choose the plan that fits your needs"),
)
MOBILE_PITCH = (
    "Read News on Your Phone",
    "Get live updates from all major newspapers and social media, right on "
    "your phone.",
)


class HomeView(View):
    """Static marketing page."""

    page = Page.HOME

    headline = HEADLINE
    tagline = TAGLINE
    features = FEATURES
    mobile_pitch = MOBILE_PITCH
    newspapers = NEWSPAPERS

    @property
    def plans(self):
        return list(PLANS.values())

    async def open_sign_in(self) -> None:
        await self.go(Page.SIGN_IN)

    async def open_sign_up(self) -> None:
        await self.go(Page.SIGN_UP)
