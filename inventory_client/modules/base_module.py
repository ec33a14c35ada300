from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget


class BaseModule(QObject):
    """A page mounted by the main window (left nav entry + stacked widget)."""

    def get_widget(self) -> QWidget:
        raise NotImplementedError

    def on_signed_out(self) -> None:
        """Called by the main window when the session ends."""
