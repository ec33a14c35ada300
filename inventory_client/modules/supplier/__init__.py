from .controller import SupplierController

__all__ = ["SupplierController"]
