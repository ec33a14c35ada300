from ...api.identity import has_permission
from ...api.repositories.users_repo import UsersRepo
from ...constants import REQUIRED_ROLE_USERS, ROLE_HIERARCHY, ROLE_LABELS
from ..forms.fields import FieldKind, FormField, FormSchema
from ..forms.form import EntityFormDialog
from ..resource_list.controller import ResourceListController
from ..resource_list.directives import ColumnKind, ColumnSpec

USER_SCHEMA = FormSchema(
    title="User",
    fields=(
        FormField("role", "Role", kind=FieldKind.CHOICE, required=True, choices=tuple(ROLE_HIERARCHY)),
        FormField("isActive", "Active", kind=FieldKind.BOOL, default=True),
    ),
)


def _role_label(role) -> str:
    return ROLE_LABELS.get(str(role or "").lower(), str(role or ""))


def _active_label(v) -> str:
    return "Active" if v else "Inactive"


class UsersController(ResourceListController):
    """Role and activation management (superadmin only)."""

    title = "Users"
    repo_class = UsersRepo
    schema = USER_SCHEMA
    can_create = False
    can_delete = False
    columns = (
        ColumnSpec("displayName", "Name"),
        ColumnSpec("email", "Email"),
        ColumnSpec("role", "Role", formatter=_role_label),
        ColumnSpec("isActive", "Status", formatter=_active_label, searchable=False),
        ColumnSpec("createdAt", "Created", ColumnKind.DATE, searchable=False),
    )

    def _can_edit(self) -> bool:
        return has_permission(self.identity.get_role(), REQUIRED_ROLE_USERS)

    def make_dialog(self, form):
        roles = sorted(ROLE_HIERARCHY, key=ROLE_HIERARCHY.get, reverse=True)
        return EntityFormDialog(form, self.view, options={"role": [(ROLE_LABELS[r], r) for r in roles]})
