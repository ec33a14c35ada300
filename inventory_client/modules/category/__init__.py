from .controller import CategoryController

__all__ = ["CategoryController"]
