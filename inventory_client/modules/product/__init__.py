"""
Products page: catalogue with stock, pricing, supplier and photo.
"""
from .controller import ProductController

__all__ = ["ProductController"]
