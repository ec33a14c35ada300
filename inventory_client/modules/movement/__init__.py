from .controller import MovementController

__all__ = ["MovementController"]
