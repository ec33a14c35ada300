# inventory_client/modules/login/controller.py
from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, Signal

from ...api.errors import AuthError, InventoryClientError
from ...api.identity import BackendIdentityProvider, Identity
from ...utils.tasks import spawn

_log = logging.getLogger(__name__)


class LoginController(QObject):
    """
    Sign-in flow: ask for the identity-provider token, exchange it with the
    backend, and emit `signedIn` with the resulting Identity.

    Public attrs (set after each attempt):
      - last_error_message: str | None
    """

    signedIn = Signal(object)
    cancelled = Signal()

    def __init__(self, provider: BackendIdentityProvider, parent=None) -> None:
        super().__init__()
        self.provider = provider
        self.parent = parent
        self.last_error_message: Optional[str] = None
        self._dialog = None

    # ----------------------------- Public API -----------------------------

    def prompt(self, message: Optional[str] = None) -> None:
        """Show the dialog (non-blocking); the result arrives via signals."""
        from .form import LoginForm  # lazy import to keep UI deps local
        dlg = LoginForm(self.parent, message)
        dlg.accepted.connect(lambda: self.sign_in(dlg.get_token()))
        dlg.rejected.connect(self._on_cancel)
        self._dialog = dlg
        dlg.open()

    def sign_in(self, token: str) -> None:
        spawn(self.provider.sign_in(token), on_done=self._on_signed_in, on_error=self._on_failed)

    # ----------------------------- Internals -----------------------------

    def _on_signed_in(self, identity: Identity) -> None:
        self.last_error_message = None
        self._dialog = None
        self.signedIn.emit(identity)

    def _on_failed(self, exc: BaseException) -> None:
        if isinstance(exc, AuthError):
            self.last_error_message = self.provider.last_error_message or str(exc)
        elif isinstance(exc, InventoryClientError):
            self.last_error_message = f"Could not reach the server: {exc}"
        else:
            _log.error("Unexpected sign-in failure", exc_info=exc)
            self.last_error_message = str(exc)
        _log.info("Sign-in failed: %s", self.last_error_message)
        self.prompt(self.last_error_message)

    def _on_cancel(self) -> None:
        _log.info("Login cancelled by user.")
        self._dialog = None
        self.cancelled.emit()
