from .directives import ColumnKind, ColumnSpec, Direction, SortDirective, derive_view, next_sort
from .engine import ResourceListEngine
from .state import EngineState, ViewState, ViewStatus

__all__ = [
    "ColumnKind",
    "ColumnSpec",
    "Direction",
    "SortDirective",
    "derive_view",
    "next_sort",
    "ResourceListEngine",
    "EngineState",
    "ViewState",
    "ViewStatus",
]
