# inventory_client/api/repositories/categories_repo.py
from .base_repo import ResourceRepo


class CategoriesRepo(ResourceRepo):
    title = "Categories"
    path = "/api/categorias"
    id_field = "id"
