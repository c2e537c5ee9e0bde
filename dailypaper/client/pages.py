from __future__ import annotations

from enum import Enum


class Page(Enum):
    """The fixed set of pages the router can show."""

    HOME = "home"
    SIGN_IN = "signin"
    SIGN_UP = "signup"
    CUSTOMER_INFO = "customer-info"
    DASHBOARD = "dashboard"
    UPDATES = "updates"
