"""
Auth gateway over the hosted identity provider, plus an in-memory double.

The API only verifies bearer tokens and creates accounts; session issuance
(password grant, OAuth) is handled by the provider and consumed by the
client application.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from dataclasses import dataclass, field
from typing import Optional, Protocol

import requests

from dailypaper.records import Account

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 10  # seconds
MIN_PASSWORD_LENGTH = 6


class Unauthorized(Exception):
    """Bearer token missing, malformed, invalid or expired."""


class AuthGatewayError(Exception):
    """The identity provider rejected a request (duplicate email, weak password)."""


class AuthGateway(Protocol):
    """Operations the API needs from the identity provider."""

    def verify_token(self, authorization: Optional[str]) -> Account:
        ...

    def create_account(self, email: str, password: str, name: str) -> Account:
        ...


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Raises:
        Unauthorized: If the header is missing or carries no token.
    """
    if not authorization:
        raise Unauthorized("No authorization header")
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        raise Unauthorized("No access token")
    return parts[1]


def provider_error_message(response: requests.Response) -> str:
    """Best-effort human-readable message from a GoTrue error body."""
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"Identity provider returned {response.status_code}"
    for key in ("msg", "message", "error_description", "error"):
        value = payload.get(key) if isinstance(payload, dict) else None
        if value:
            return str(value)
    return f"Identity provider returned {response.status_code}"


@dataclass
class InMemoryAuthGateway:
    """Test double keeping accounts and issued tokens in process memory."""

    accounts: dict[str, Account] = field(default_factory=dict)
    passwords: dict[str, str] = field(default_factory=dict)
    tokens: dict[str, str] = field(default_factory=dict)

    def verify_token(self, authorization: Optional[str]) -> Account:
        token = extract_bearer_token(authorization)
        account_id = self.tokens.get(token)
        if not account_id or account_id not in self.accounts:
            raise Unauthorized("Unauthorized")
        return self.accounts[account_id]

    def create_account(self, email: str, password: str, name: str) -> Account:
        normalized = email.strip().lower()
        if any(a.email == normalized for a in self.accounts.values()):
            raise AuthGatewayError(
                "A user with this email address has already been registered"
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthGatewayError(
                f"Password should be at least {MIN_PASSWORD_LENGTH} characters."
            )
        account = Account(id=str(uuid.uuid4()), email=normalized, name=name)
        self.accounts[account.id] = account
        self.passwords[account.id] = password
        return account

    def sign_in_with_password(self, email: str, password: str) -> tuple[Account, str]:
        normalized = email.strip().lower()
        for account in self.accounts.values():
            if account.email == normalized and self.passwords[account.id] == password:
                return account, self.issue_token(account.id)
        raise AuthGatewayError("Invalid login credentials")

    def issue_token(self, account_id: str) -> str:
        token = secrets.token_urlsafe(32)
        self.tokens[token] = account_id
        return token

    def revoke_token(self, token: str) -> None:
        self.tokens.pop(token, None)

    def reset(self) -> None:
        self.accounts.clear()
        self.passwords.clear()
        self.tokens.clear()


@dataclass
class SupabaseAuthGateway:
    """
    GoTrue-backed gateway using the service role key.

    Token verification calls ``GET /auth/v1/user`` with the caller's token;
    account creation uses the admin endpoint with ``email_confirm`` set so
    no email-verification step is required.
    """

    url: str
    service_role_key: str
    timeout: float = REQUEST_TIMEOUT

    def __post_init__(self):
        self.url = self.url.rstrip("/")
        self._session = requests.Session()
        self._session.headers.update({"apikey": self.service_role_key})

    def verify_token(self, authorization: Optional[str]) -> Account:
        token = extract_bearer_token(authorization)
        try:
            response = self._session.get(
                f"{self.url}/auth/v1/user",
                headers={"Authorization": f"Bearer {token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Token verification request failed: %s", exc)
            raise Unauthorized("Unauthorized") from exc
        if not response.ok:
            raise Unauthorized("Unauthorized")
        payload = response.json()
        if not payload.get("id"):
            raise Unauthorized("Unauthorized")
        return Account.from_provider(payload)

    def create_account(self, email: str, password: str, name: str) -> Account:
        response = self._session.post(
            f"{self.url}/auth/v1/admin/users",
            headers={"Authorization": f"Bearer {self.service_role_key}"},
            json={
                "email": email,
                "password": password,
                "user_metadata": {"name": name},
                "email_confirm": True,
            },
            timeout=self.timeout,
        )
        if not response.ok:
            message = provider_error_message(response)
            logger.error("Sign up error: %s", message)
            raise AuthGatewayError(message)
        payload = response.json()
        # Some GoTrue versions wrap the created user.
        user = payload.get("user", payload)
        return Account.from_provider(user)
