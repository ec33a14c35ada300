"""List page widgets: one of loading / error / empty / table, and the table model."""

from PySide6.QtCore import Qt

from inventory_client.constants import MSG_EMPTY, MSG_NO_MATCH
from inventory_client.modules.resource_list.model import ResourceTableModel
from inventory_client.modules.resource_list.state import ViewState
from inventory_client.modules.resource_list.view import ResourceListView
from inventory_client.utils.helpers import fmt_money
from inventory_client.modules.resource_list.directives import ColumnKind, ColumnSpec

from tests.conftest import PRODUCT_COLUMNS, product


def test_view_renders_exactly_one_state(qapp):
    view = ResourceListView(PRODUCT_COLUMNS, "Products")
    assert view.body.currentIndex() == view.PAGE_LOADING

    view.render(ViewState.failed("Error connecting to the server"))
    assert view.body.currentIndex() == view.PAGE_ERROR
    assert view.lbl_error.text() == "Error connecting to the server"

    view.render(ViewState.ready([]))
    assert view.body.currentIndex() == view.PAGE_EMPTY
    assert view.lbl_empty.text() == MSG_EMPTY

    view.render(ViewState.ready([]), filtered=True)
    assert view.lbl_empty.text() == MSG_NO_MATCH

    view.render(ViewState.ready([product(1, "Bolt")]))
    assert view.body.currentIndex() == view.PAGE_TABLE


def test_filter_field_lists_searchable_columns(qapp):
    view = ResourceListView(PRODUCT_COLUMNS, "Products")
    keys = [view.filter_field.itemData(i) for i in range(view.filter_field.count())]
    assert keys[0] == "*"
    assert "created" not in keys
    assert "supplier" in keys


def test_pager_buttons_follow_page_position(qapp):
    view = ResourceListView(PRODUCT_COLUMNS, "Products")
    view.set_pager(1, 3, 55)
    assert not view.btn_prev.isEnabled()
    assert view.btn_next.isEnabled()
    assert view.lbl_page.text() == "Page 1 of 3 (55 records)"
    view.set_pager(3, 3, 55)
    assert view.btn_prev.isEnabled()
    assert not view.btn_next.isEnabled()


def test_table_model_displays_formatted_cells(qapp):
    cols = (
        ColumnSpec("name", "Name"),
        ColumnSpec("supplier", "Supplier", path="supplier.name"),
        ColumnSpec("price", "Price", ColumnKind.NUMBER, formatter=fmt_money),
    )
    model = ResourceTableModel(cols, [product(1, "Bolt", supplier="Acme", price=1234.5)])
    assert model.rowCount() == 1
    assert model.columnCount() == 3
    assert model.headerData(1, Qt.Horizontal) == "Supplier"
    assert model.data(model.index(0, 1)) == "Acme"
    assert model.data(model.index(0, 2)) == "$1,234.50"
    assert model.index_of("price") == 2

    model.replace([])
    assert model.rowCount() == 0
