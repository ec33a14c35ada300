from .base_repo import MutationMode, MutationRequest, ResourceRepo
from .categories_repo import CategoriesRepo
from .movements_repo import MovementsRepo
from .products_repo import ProductsRepo
from .receipts_repo import ReceiptsRepo
from .sales_repo import SalesRepo
from .suppliers_repo import SuppliersRepo
from .users_repo import UsersRepo

__all__ = [
    "MutationMode",
    "MutationRequest",
    "ResourceRepo",
    "CategoriesRepo",
    "MovementsRepo",
    "ProductsRepo",
    "ReceiptsRepo",
    "SalesRepo",
    "SuppliersRepo",
    "UsersRepo",
]
