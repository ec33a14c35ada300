# inventory_client/api/repositories/users_repo.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from ..errors import ValidationError
from ..identity import is_known_role
from .base_repo import MutationMode, ResourceRepo


class UsersRepo(ResourceRepo):
    """
    Backend user accounts (superadmin only).

    Updates are routed to the backend's dedicated endpoints:
      - {"role": ...}     -> PUT /api/users/<uid>/role
      - {"isActive": ...} -> PUT /api/users/<uid>/status
    """

    title = "Users"
    path = "/api/users"
    id_field = "uid"

    async def create(self, fields: Mapping[str, Any], *, token: Optional[str] = None) -> Any:
        raise ValidationError("Users are created by signing in for the first time.")

    async def delete(self, record_id: Any, *, token: Optional[str] = None) -> Any:
        raise ValidationError("Users cannot be deleted; deactivate them instead.")

    async def update(self, record_id: Any, fields: Mapping[str, Any], *, token: Optional[str] = None) -> Any:
        result = None
        if "role" in fields:
            role = fields["role"]
            if not is_known_role(role):
                raise ValidationError(f"Unknown role: {role}", field="role")
            result = await self.transport.request(
                f"{self.path}/{record_id}/role", method="PUT", json={"role": role}, token=token
            )
        if "isActive" in fields:
            result = await self.transport.request(
                f"{self.path}/{record_id}/status",
                method="PUT",
                json={"isActive": bool(fields["isActive"])},
                token=token,
            )
        if result is None and not ({"role", "isActive"} & set(fields)):
            raise ValidationError("Nothing to update.")
        return result

    def to_api(self, fields: Mapping[str, Any], mode: MutationMode) -> dict:
        return {k: fields[k] for k in ("role", "isActive") if k in fields}
