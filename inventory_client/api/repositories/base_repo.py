# inventory_client/api/repositories/base_repo.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from ...utils.helpers import get_path
from ..envelope import Page, normalize_page
from ..errors import ValidationError

_log = logging.getLogger(__name__)


class MutationMode(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class MutationRequest:
    """
    A partial record (only the fields the user may change) plus the mode.
    `record_id` is required for update/delete.
    """
    mode: MutationMode
    fields: Mapping[str, Any] = field(default_factory=dict)
    record_id: Any = None

    @classmethod
    def create(cls, fields: Mapping[str, Any]) -> "MutationRequest":
        return cls(MutationMode.CREATE, dict(fields))

    @classmethod
    def update(cls, record_id: Any, fields: Mapping[str, Any]) -> "MutationRequest":
        return cls(MutationMode.UPDATE, dict(fields), record_id)

    @classmethod
    def delete(cls, record_id: Any) -> "MutationRequest":
        return cls(MutationMode.DELETE, {}, record_id)


class ResourceRepo:
    """
    One REST collection:

        GET    <path>?page=N&pageSize=M&search=S
        POST   <path>            (create)
        PUT    <path>?id=ID      (update, partial body)
        DELETE <path>?id=ID

    Subclasses set `path`, `id_field`, optional fixed `list_params`, and
    translate display records to the backend's write schema in `to_api`.
    """

    title: str = ""
    path: str = ""
    id_field: str = "id"
    list_params: Mapping[str, Any] = {}
    read_only: bool = False

    def __init__(self, transport):
        self.transport = transport

    # ---------------------------- reads ----------------------------

    async def list_page(
        self,
        page: int,
        page_size: int,
        search: Optional[str] = None,
        *,
        token: Optional[str] = None,
    ) -> Page:
        params: dict[str, Any] = dict(self.list_params)
        params["page"] = int(page)
        params["pageSize"] = int(page_size)
        if search and search.strip():
            params["search"] = search.strip()
        body = await self.transport.request(self.path, params=params, token=token)
        return normalize_page(body, page=page, page_size=page_size)

    def record_id(self, record: Mapping[str, Any]) -> Any:
        return get_path(record, self.id_field)

    # ---------------------------- writes ----------------------------

    def to_api(self, fields: Mapping[str, Any], mode: MutationMode) -> dict:
        """Display-shaped fields -> request body. Identity by default."""
        return dict(fields)

    async def create(self, fields: Mapping[str, Any], *, token: Optional[str] = None) -> Any:
        return await self.transport.request(
            self.path, method="POST", json=self.to_api(fields, MutationMode.CREATE), token=token
        )

    async def update(self, record_id: Any, fields: Mapping[str, Any], *, token: Optional[str] = None) -> Any:
        return await self.transport.request(
            self.path,
            method="PUT",
            params={"id": record_id},
            json=self.to_api(fields, MutationMode.UPDATE),
            token=token,
        )

    async def delete(self, record_id: Any, *, token: Optional[str] = None) -> Any:
        return await self.transport.request(
            self.path, method="DELETE", params={"id": record_id}, token=token
        )

    def check(self, request: MutationRequest) -> None:
        """Reject requests that must never reach the server."""
        if self.read_only:
            raise ValidationError(f"{self.title or 'This list'} is read-only.")
        if request.mode in (MutationMode.UPDATE, MutationMode.DELETE) and request.record_id in (None, ""):
            raise ValidationError(f"A record id is required to {request.mode.value}.")

    async def execute(self, request: MutationRequest, *, token: Optional[str] = None) -> Any:
        self.check(request)
        _log.info("%s %s id=%s", self.title or self.path, request.mode.value, request.record_id)
        if request.mode is MutationMode.CREATE:
            return await self.create(request.fields, token=token)
        if request.mode is MutationMode.UPDATE:
            return await self.update(request.record_id, request.fields, token=token)
        return await self.delete(request.record_id, token=token)
