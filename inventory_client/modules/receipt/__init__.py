from .controller import ReceiptController

__all__ = ["ReceiptController"]
