from ...api.repositories.categories_repo import CategoriesRepo
from ..forms.fields import FormField, FormSchema
from ..resource_list.controller import ResourceListController
from ..resource_list.directives import ColumnKind, ColumnSpec

CATEGORY_SCHEMA = FormSchema(
    title="Category",
    fields=(FormField("name", "Name", required=True),),
)


class CategoryController(ResourceListController):
    title = "Categories"
    repo_class = CategoriesRepo
    schema = CATEGORY_SCHEMA
    columns = (
        ColumnSpec("id", "ID", ColumnKind.NUMBER),
        ColumnSpec("name", "Name"),
    )
