# inventory_client/api/identity.py
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional, Protocol

from ..constants import ROLE_HIERARCHY
from .errors import AuthError

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """
    The signed-in user as the rest of the app sees it (read-only).

    List pages and forms read `token` (to prove authorization is available)
    and `role` (to gate actions); nothing else mutates it.
    """
    token: str
    role: Optional[str] = None
    display_name: Optional[str] = None
    email: Optional[str] = None
    uid: Optional[str] = None

    @classmethod
    def from_mapping(cls, token: str, m: Mapping[str, Any]) -> "Identity":
        """
        Build from a backend user payload; accepts both `{"user": {...}}`
        and the bare user object.
        """
        user = m.get("user", m) if isinstance(m, Mapping) else {}
        if not isinstance(user, Mapping):
            user = {}
        role = user.get("role")
        return cls(
            token=token,
            role=str(role).lower() if role else None,
            display_name=user.get("displayName") or user.get("nombre") or user.get("username"),
            email=user.get("email"),
            uid=str(user["uid"]) if user.get("uid") is not None else None,
        )


# ---------------------------- roles ----------------------------

def role_rank(role: Optional[str]) -> int:
    """Position in the hierarchy; unknown or missing roles rank below everyone."""
    if not role:
        return 0
    return ROLE_HIERARCHY.get(str(role).lower(), 0)


def has_permission(role: Optional[str], required: str) -> bool:
    """True iff `role` is equal to or above `required` in the hierarchy."""
    rank = role_rank(role)
    return rank > 0 and rank >= role_rank(required)


def is_known_role(role: Optional[str]) -> bool:
    return role_rank(role) > 0


# ---------------------------- providers ----------------------------

class IdentityProvider(Protocol):
    """Contract the list/form layer relies on."""

    def get_token(self) -> Optional[str]: ...

    def get_role(self) -> Optional[str]: ...

    def sign_out(self) -> None: ...


class _ProviderBase:
    """Shared bookkeeping: current identity + sign-out listeners."""

    def __init__(self) -> None:
        self._identity: Optional[Identity] = None
        self._on_sign_out: list[Callable[[], None]] = []

    @property
    def identity(self) -> Optional[Identity]:
        return self._identity

    def get_token(self) -> Optional[str]:
        return self._identity.token if self._identity else None

    def get_role(self) -> Optional[str]:
        return self._identity.role if self._identity else None

    def require_token(self) -> str:
        token = self.get_token()
        if not token:
            raise AuthError("You are not signed in.")
        return token

    def add_sign_out_listener(self, callback: Callable[[], None]) -> None:
        self._on_sign_out.append(callback)

    def sign_out(self) -> None:
        was_signed_in = self._identity is not None
        self._identity = None
        if not was_signed_in:
            return
        _log.info("Signed out")
        for cb in list(self._on_sign_out):
            cb()


class StaticIdentityProvider(_ProviderBase):
    """Wraps an identity that was obtained elsewhere (config token, tests)."""

    def __init__(self, identity: Optional[Identity] = None):
        super().__init__()
        self._identity = identity

    @classmethod
    def from_token(cls, token: str, role: Optional[str] = None) -> "StaticIdentityProvider":
        return cls(Identity(token=token, role=role) if token else None)


class BackendIdentityProvider(_ProviderBase):
    """
    Exchanges a token issued by the external identity service for the
    backend user (role, name, email).

    - sign_in(token): POST /api/auth/login with the token as bearer
    - refresh():      GET  /api/auth/me to re-read the role
    """

    LOGIN_PATH = "/api/auth/login"
    ME_PATH = "/api/auth/me"

    def __init__(self, transport) -> None:
        super().__init__()
        self.transport = transport
        self.last_error_message: Optional[str] = None

    async def sign_in(self, provider_token: str) -> Identity:
        self.last_error_message = None
        token = (provider_token or "").strip()
        if not token:
            self.last_error_message = "Please enter your access token."
            raise AuthError(self.last_error_message)
        try:
            body = await self.transport.request(self.LOGIN_PATH, method="POST", token=token)
        except AuthError as exc:
            self.last_error_message = str(exc) or "Backend authentication failed"
            raise
        self._identity = Identity.from_mapping(token, body or {})
        _log.info("Signed in as %s (%s)", self._identity.email, self._identity.role)
        return self._identity

    async def refresh(self) -> Identity:
        token = self.require_token()
        body = await self.transport.request(self.ME_PATH, token=token)
        fresh = Identity.from_mapping(token, body or {})
        self._identity = replace(fresh, token=token)
        return self._identity
