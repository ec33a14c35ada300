# inventory_client/modules/resource_list/state.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EngineState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ViewStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


@dataclass(frozen=True)
class ViewState:
    """
    What a list page renders. Exactly one of: loading text, error banner
    (with retry), empty message, or the rows.
    """
    status: ViewStatus
    rows: tuple = ()
    message: Optional[str] = None

    @classmethod
    def loading(cls) -> "ViewState":
        return cls(ViewStatus.LOADING)

    @classmethod
    def failed(cls, message: str) -> "ViewState":
        return cls(ViewStatus.ERROR, (), message)

    @classmethod
    def ready(cls, rows) -> "ViewState":
        return cls(ViewStatus.READY, tuple(rows))

    @property
    def is_empty(self) -> bool:
        return self.status is ViewStatus.READY and not self.rows
