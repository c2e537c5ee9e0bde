"""
Fixed product catalog: subscription plans, newspapers and news sources.

Shared by the API (plan validation and pricing) and the client views.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Plan:
    id: str
    name: str
    price: str
    ugx: str
    description: str
    features: tuple[str, ...]
    popular: bool = False

    @property
    def display_price(self) -> str:
        """Price string stored on subscriptions, e.g. ``$34 (UGX 125,000)``."""
        return f"{self.price} ({self.ugx})"


@dataclass(frozen=True)
class Newspaper:
    id: str
    name: str


@dataclass(frozen=True)
class NewsSource:
    id: str
    name: str


PLANS: dict[str, Plan] = {
    "daily": Plan(
        id="daily",
        name="Daily",
        price="$1.2",
        ugx="UGX 3,500",
        description="Choose one newspaper daily",
        features=("Choose one newspaper", "Daily delivery", "Cancel anytime"),
    ),
    "monthly": Plan(
        id="monthly",
        name="Monthly",
        price="$34",
        ugx="UGX 125,000",
        description="All newspapers for 30 days",
        features=(
            "All newspapers",
            "Daily delivery",
            "30-day access",
            "Priority support",
        ),
        popular=True,
    ),
    "premium": Plan(
        id="premium",
        name="Premium",
        price="$142",
        ugx="UGX 505,000",
        description="All newspapers + weekend editions",
        features=(
            "All newspapers",
            "Daily delivery",
            "Weekend editions",
            "VIP support",
            "Digital access",
        ),
    ),
}

# Plans that deliver a single chosen title rather than the whole catalog.
SINGLE_PAPER_PLANS = frozenset({"daily"})

NEWSPAPERS: tuple[Newspaper, ...] = (
    Newspaper("new-vision", "New Vision"),
    Newspaper("bukedde", "Bukedde"),
    Newspaper("daily-monitor", "Daily Monitor"),
    Newspaper("daily-nation", "Daily Nation"),
)

NEWS_SOURCES: tuple[NewsSource, ...] = (
    NewsSource("all", "All Sources"),
    NewsSource("new-vision", "New Vision"),
    NewsSource("monitor", "Daily Monitor"),
    NewsSource("nation", "Daily Nation"),
    NewsSource("social", "Social Media"),
)


def get_plan(plan_id: str | None) -> Plan | None:
    if not plan_id:
        return None
    return PLANS.get(plan_id)
