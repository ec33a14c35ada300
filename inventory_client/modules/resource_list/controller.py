import logging
from typing import Optional

from PySide6.QtWidgets import QWidget

from ...api.errors import AuthError, InventoryClientError, NetworkError
from ...api.identity import has_permission
from ...api.repositories.base_repo import MutationMode, MutationRequest, ResourceRepo
from ...constants import REQUIRED_ROLE_DELETE, REQUIRED_ROLE_EDIT
from ...utils.tasks import spawn
from ...utils.ui_helpers import confirm, error, info
from ..base_module import BaseModule
from ..forms.controller import EntityFormController
from ..forms.fields import FormSchema
from ..forms.form import EntityFormDialog
from .directives import Direction
from .engine import ResourceListEngine
from .model import ResourceTableModel
from .state import ViewState
from .view import ResourceListView

_log = logging.getLogger(__name__)


class ResourceListController(BaseModule):
    """
    One list page: engine + table + form dialogs for a single resource.

    Subclasses set `title`, `repo_class`, `columns` and (for editable
    resources) `schema`; dialogs with extra sections override `make_dialog`.
    """

    title: str = ""
    repo_class: type = ResourceRepo
    columns: tuple = ()
    schema: Optional[FormSchema] = None
    dialog_class: type = EntityFormDialog
    can_create: bool = True
    can_update: bool = True
    can_delete: bool = True

    def __init__(self, transport, identity, *, autoload: bool = True):
        super().__init__()
        self.transport = transport
        self.identity = identity
        self.repo = self.repo_class(transport)
        self.engine = ResourceListEngine(self.repo, identity, self.columns)
        self.view = ResourceListView(self.columns, self.title)
        self.model = ResourceTableModel(list(self.columns))
        self.view.table.setModel(self.model)
        self._unsubscribe = self.engine.subscribe(self._render)
        self._dialog: Optional[EntityFormDialog] = None
        self._deleting = False
        self._wire()
        self._apply_permissions()
        if autoload:
            self._reload()

    def get_widget(self) -> QWidget:
        return self.view

    def _wire(self):
        v = self.view
        v.btn_add.clicked.connect(self._add)
        v.btn_edit.clicked.connect(self._edit)
        v.btn_del.clicked.connect(self._delete)
        v.btn_retry.clicked.connect(self._retry)
        v.btn_clear.clicked.connect(self._clear_filters)
        v.btn_prev.clicked.connect(lambda: self._run(self.engine.previous_page()))
        v.btn_next.clicked.connect(lambda: self._run(self.engine.next_page()))
        v.search.textChanged.connect(self._on_search_changed)
        v.filter_text.textChanged.connect(self._on_filter_changed)
        v.filter_field.currentIndexChanged.connect(self._on_filter_field_changed)
        v.table.horizontalHeader().sectionClicked.connect(self._on_header_clicked)
        v.table.doubleClicked.connect(lambda _idx: self._edit())

    # ---------------- permissions ----------------

    def _can_edit(self) -> bool:
        return (
            self.schema is not None
            and not self.repo.read_only
            and has_permission(self.identity.get_role(), REQUIRED_ROLE_EDIT)
        )

    def _can_delete(self) -> bool:
        return (
            self.can_delete
            and not self.repo.read_only
            and has_permission(self.identity.get_role(), REQUIRED_ROLE_DELETE)
        )

    def _apply_permissions(self):
        editable = self._can_edit()
        self.view.btn_add.setVisible(not self.repo.read_only and self.schema is not None and self.can_create)
        self.view.btn_edit.setVisible(not self.repo.read_only and self.schema is not None and self.can_update)
        self.view.btn_del.setVisible(not self.repo.read_only and self.can_delete)
        self.view.btn_add.setEnabled(editable)
        self.view.btn_edit.setEnabled(editable)
        self.view.btn_del.setEnabled(self._can_delete() and not self._deleting)

    # ---------------- engine plumbing ----------------

    def _run(self, coro):
        return spawn(coro, on_error=self._on_task_error)

    def _on_task_error(self, exc: BaseException):
        if isinstance(exc, AuthError):
            _log.info("%s: session expired, signing out", self.title)
            self.identity.sign_out()
            return
        if isinstance(exc, NetworkError):
            # load failures are already on screen as the error banner
            return
        if isinstance(exc, InventoryClientError):
            error(self.view, self.title, str(exc))
            return
        _log.error("%s: unexpected error", self.title, exc_info=exc)

    def _reload(self):
        self._run(self.engine.load(1, self.engine.search_term))

    def _retry(self):
        self._run(self.engine.retry())

    def _render(self, state: ViewState):
        self.model.replace(state.rows)
        self.view.render(state, filtered=bool(self.engine.filters))
        p = self.engine.page
        self.view.set_pager(p.page, p.total_pages, p.total)
        sort = self.engine.sort
        if sort is None:
            self.view.table.show_sort(-1, None)
        else:
            self.view.table.show_sort(self.model.index_of(sort.field), sort.direction is Direction.ASC)

    # ---------------- directives ----------------

    def _on_search_changed(self, text: str):
        task = self.engine.search(text)
        task.add_done_callback(self._search_finished)

    def _search_finished(self, task):
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._on_task_error(exc)

    def _on_filter_field_changed(self, _index: int):
        # move the current text to the newly chosen field
        for key in list(self.engine.filters):
            self.engine.set_filter(key, None)
        self._on_filter_changed(self.view.filter_text.text())

    def _on_filter_changed(self, text: str):
        self.engine.set_filter(self.view.filter_field.currentData(), text)

    def _on_header_clicked(self, section: int):
        col = self.model.column(section)
        if col.sortable:
            self.engine.set_sort(col.key)

    def _clear_filters(self):
        self.view.filter_text.blockSignals(True)
        self.view.filter_text.clear()
        self.view.filter_text.blockSignals(False)
        self.engine.clear_all()

    # ---------------- CRUD ----------------

    def _selected_record(self) -> Optional[dict]:
        row = self.view.table.selected_row()
        if row is None:
            return None
        return self.model.at(row)

    def make_form(self) -> EntityFormController:
        return EntityFormController(self.schema, self.engine)

    def make_dialog(self, form: EntityFormController) -> EntityFormDialog:
        return self.dialog_class(form, self.view)

    def dialog_ready(self, dlg: EntityFormDialog) -> None:
        """Hook: start async option loading for related fields."""

    def _open_form(self, mode: MutationMode, seed: Optional[dict] = None):
        form = self.make_form()
        form.open(mode, seed)
        dlg = self.make_dialog(form)
        dlg.authFailed.connect(self._on_task_error)
        self._dialog = dlg
        self.dialog_ready(dlg)
        dlg.open()

    def _add(self):
        if not (self.can_create and self._can_edit()):
            return
        self._open_form(MutationMode.CREATE)

    def _edit(self):
        if not (self.can_update and self._can_edit()):
            return
        rec = self._selected_record()
        if not rec:
            info(self.view, "Select", f"Please select a row in {self.title} to edit.")
            return
        self._open_form(MutationMode.UPDATE, rec)

    def _delete(self):
        if self._deleting or not self._can_delete():
            return
        rec = self._selected_record()
        if not rec:
            info(self.view, "Select", f"Please select a row in {self.title} to delete.")
            return
        if not confirm(self.view, "Delete", "Delete the selected record? This cannot be undone."):
            return
        request = MutationRequest.delete(self.repo.record_id(rec))
        self._deleting = True
        self.view.btn_del.setEnabled(False)
        self._run(self._delete_async(request))

    async def _delete_async(self, request: MutationRequest):
        try:
            await self.engine.mutate(request)
        except NetworkError as exc:
            error(self.view, "Delete failed", str(exc))
        finally:
            self._deleting = False
            self._apply_permissions()

    def on_signed_out(self) -> None:
        self.engine.cancel_pending()
        if self._dialog is not None:
            self._dialog.reject()
            self._dialog = None
