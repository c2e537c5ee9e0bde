"""
Signed-in state shared by the router and its views.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from dailypaper.records import Account

logger = logging.getLogger(__name__)


@dataclass
class SessionContext:
    """
    The signed-in ``(account, access_token)`` pair.

    Written only by ``populate`` (startup restore or sign-in) and ``clear``
    (sign-out); everything else reads it.
    """

    account: Optional[Account] = None
    access_token: str = ""

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None and bool(self.access_token)

    def populate(self, account: Account, access_token: str) -> None:
        self.account = account
        self.access_token = access_token
        logger.info("Session started for %s", account.email)

    def clear(self) -> None:
        self.account = None
        self.access_token = ""

    def authorization(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}
