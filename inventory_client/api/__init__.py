"""
Remote data layer: transport, identity and per-resource repositories.
"""

from .errors import (
    AuthError,
    HttpError,
    InventoryClientError,
    NetworkError,
    ValidationError,
)
from .envelope import Page, normalize_page
from .identity import (
    BackendIdentityProvider,
    Identity,
    IdentityProvider,
    StaticIdentityProvider,
    has_permission,
)
from .transport import Transport

__all__ = [
    "AuthError",
    "HttpError",
    "InventoryClientError",
    "NetworkError",
    "ValidationError",
    "Page",
    "normalize_page",
    "BackendIdentityProvider",
    "Identity",
    "IdentityProvider",
    "StaticIdentityProvider",
    "has_permission",
    "Transport",
]
