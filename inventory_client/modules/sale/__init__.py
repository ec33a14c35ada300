from .controller import SaleController

__all__ = ["SaleController"]
