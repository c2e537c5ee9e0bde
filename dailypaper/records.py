"""
Records persisted in (or produced alongside) the key-value store.

Stored values use the camelCase wire shape so the same JSON is served by
the API and read back by the client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

CUSTOMER_INFO_KIND = "customer_info"
SUBSCRIPTION_KIND = "subscription"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Render a datetime as an ISO-8601 UTC string with a ``Z`` suffix."""
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    return to_iso(utc_now())


def parse_iso(value: str) -> datetime:
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def record_key(kind: str, account_id: str) -> str:
    """Flat namespace key of the form ``<entity-kind>:<accountId>``."""
    return f"{kind}:{account_id}"


@dataclass
class Account:
    id: str
    email: str
    name: Optional[str] = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "user_metadata": {"name": self.name} if self.name else {},
        }

    @classmethod
    def from_provider(cls, payload: dict) -> "Account":
        """Build an account from an identity-provider user object."""
        metadata = payload.get("user_metadata") or {}
        return cls(
            id=payload["id"],
            email=payload.get("email") or "",
            name=metadata.get("name"),
        )


@dataclass
class CustomerInfo:
    full_name: str
    telephone: str
    address: str
    plot_number: str
    street_number: str
    user_id: str
    updated_at: str = field(default_factory=utc_now_iso)

    def as_dict(self) -> dict:
        return {
            "fullName": self.full_name,
            "telephone": self.telephone,
            "address": self.address,
            "plotNumber": self.plot_number,
            "streetNumber": self.street_number,
            "userId": self.user_id,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "CustomerInfo":
        return cls(
            full_name=payload["fullName"],
            telephone=payload["telephone"],
            address=payload["address"],
            plot_number=payload["plotNumber"],
            street_number=payload["streetNumber"],
            user_id=payload["userId"],
            updated_at=payload["updatedAt"],
        )


@dataclass
class Subscription:
    user_id: str
    plan: str
    plan_name: str
    plan_price: str
    newspaper: Optional[str] = None
    start_date: str = field(default_factory=utc_now_iso)
    active: bool = True

    def as_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "plan": self.plan,
            "planName": self.plan_name,
            "planPrice": self.plan_price,
            "newspaper": self.newspaper,
            "startDate": self.start_date,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "Subscription":
        return cls(
            user_id=payload["userId"],
            plan=payload["plan"],
            plan_name=payload["planName"],
            plan_price=payload["planPrice"],
            newspaper=payload.get("newspaper"),
            start_date=payload["startDate"],
            active=bool(payload.get("active", True)),
        )


@dataclass(frozen=True)
class NewsArticle:
    id: str
    title: str
    description: str
    source: str
    url: str
    published_at: str
    image: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "source": self.source,
            "url": self.url,
            "publishedAt": self.published_at,
            "image": self.image,
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "NewsArticle":
        return cls(
            id=payload["id"],
            title=payload["title"],
            description=payload["description"],
            source=payload["source"],
            url=payload["url"],
            published_at=payload["publishedAt"],
            image=payload["image"],
        )
