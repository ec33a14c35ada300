# inventory_client/api/errors.py
from __future__ import annotations

from typing import Optional


class InventoryClientError(Exception):
    """Base class for errors the controllers/UI can surface."""


class NetworkError(InventoryClientError):
    """
    Transport failure or non-2xx response.
    Retryable: re-invoking the same operation may succeed.
    """


class HttpError(NetworkError):
    """Non-2xx response; `message` is the server's error text when it sent one."""

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = int(status)
        self.message = message

    def __repr__(self) -> str:
        return f"HttpError(status={self.status}, message={self.message!r})"


class AuthError(InventoryClientError):
    """
    Missing or expired credentials. Fatal for the current session: callers
    propagate it so the shell can sign out, never retry it in place.
    """


class ValidationError(InventoryClientError):
    """Client-side required-field or coercion failure. Never sent to the server."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
