"""Entity form controller: validation, coercion, single-flight submit, attachments."""

import asyncio
import base64

import pytest

from inventory_client.api.errors import AuthError, HttpError, ValidationError
from inventory_client.api.repositories.base_repo import MutationMode
from inventory_client.modules.forms.controller import EntityFormController, LineItemsEditor
from inventory_client.modules.forms.fields import BlankPolicy, FieldKind, FormField, FormSchema
from inventory_client.modules.product.form import PRODUCT_SCHEMA
from inventory_client.modules.supplier.controller import SUPPLIER_SCHEMA

from tests.conftest import FakeEngine, product


@pytest.fixture
def fake_engine():
    return FakeEngine()


@pytest.fixture
def product_form(fake_engine):
    form = EntityFormController(PRODUCT_SCHEMA, fake_engine)
    form.open("create")
    return form


# ── Validation ──


@pytest.mark.asyncio
async def test_missing_required_field_blocks_submit(product_form, fake_engine):
    product_form.set_value("name", "Widget")
    product_form.set_value("sku", "")
    with pytest.raises(ValidationError) as exc_info:
        await product_form.submit()
    assert exc_info.value.field == "sku"
    assert product_form.error == "SKU is required."
    assert fake_engine.requests == []
    assert product_form.is_open


def test_validate_reports_first_problem_in_field_order(product_form):
    assert product_form.validate() == "Name is required."
    product_form.set_value("name", "Widget")
    assert product_form.validate() == "SKU is required."


def test_negative_quantity_is_rejected(product_form):
    product_form.set_value("name", "Widget")
    product_form.set_value("sku", "W-1")
    product_form.set_value("stock", "-3")
    assert product_form.validate() == "Stock must be at least 0."


def test_unknown_field_raises_key_error(product_form):
    with pytest.raises(KeyError):
        product_form.set_value("nope", 1)


# ── Coercion ──


def test_product_numeric_fields_coerce_to_zero_and_pallet_is_omitted(product_form):
    product_form.set_value("name", " Widget ")
    product_form.set_value("sku", "W-1")
    product_form.set_value("price", "12.5")
    product_form.set_value("cost", "abc")
    product_form.set_value("standard_tarima", "n/a")
    product_form.set_value("supplier.id", "7")
    body = product_form.serialize()
    assert body["name"] == "Widget"
    assert body["price"] == 12.5
    assert body["cost"] == 0
    assert body["stock"] == 0
    assert body["dimensions_cm"] == {"largo": 0, "ancho": 0, "alto": 0}
    assert body["supplier"] == {"id": 7}
    assert "standard_tarima" not in body


def test_supplier_lead_time_unparseable_becomes_null(fake_engine):
    form = EntityFormController(SUPPLIER_SCHEMA, fake_engine)
    form.open("create")
    form.set_value("name", "Acme")
    form.set_value("lead_time", "soon")
    assert form.serialize() == {"name": "Acme", "city": None, "lead_time": None}


def test_blank_policies():
    schema = FormSchema("T", (
        FormField("a", "A", kind=FieldKind.INT, blank=BlankPolicy.ZERO),
        FormField("b", "B", kind=FieldKind.INT, blank=BlankPolicy.NULL),
        FormField("c", "C", kind=FieldKind.INT, blank=BlankPolicy.OMIT),
        FormField("d", "D", kind=FieldKind.INT),
    ))
    form = EntityFormController(schema, FakeEngine())
    form.open("create")
    form.values.update({"a": "", "b": "x", "c": " ", "d": "4"})
    assert form.serialize() == {"a": 0, "b": None, "d": 4}


# ── Open / seed ──


def test_open_for_edit_seeds_values_and_record_id(fake_engine):
    rec = product(3, "Clamp", 10, supplier="Acme", price=2.5, dimensions_cm={"largo": 4, "ancho": 2, "alto": 1})
    form = EntityFormController(PRODUCT_SCHEMA, fake_engine)
    form.open("update", rec)
    assert form.mode is MutationMode.UPDATE
    assert form.record_id == 3
    assert form.values["name"] == "Clamp"
    assert form.values["supplier.id"] == 30
    assert form.values["dimensions_cm.largo"] == 4
    req = form.build_request()
    assert req.mode is MutationMode.UPDATE
    assert req.record_id == 3


def test_reopening_clears_previous_error(product_form):
    product_form.error = "old"
    product_form.open("create")
    assert product_form.error is None


# ── Submit ──


@pytest.mark.asyncio
async def test_successful_submit_sends_one_request_and_closes(product_form, fake_engine):
    product_form.set_value("name", "Widget")
    product_form.set_value("sku", "W-1")
    assert await product_form.submit() is True
    assert len(fake_engine.requests) == 1
    assert fake_engine.requests[0].mode is MutationMode.CREATE
    assert not product_form.is_open


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_ignored(product_form, fake_engine):
    product_form.set_value("name", "Widget")
    product_form.set_value("sku", "W-1")
    fake_engine.gate = asyncio.Event()

    first = asyncio.ensure_future(product_form.submit())
    await asyncio.sleep(0)
    assert product_form.is_submitting
    assert await product_form.submit() is False

    fake_engine.gate.set()
    assert await first is True
    assert len(fake_engine.requests) == 1


@pytest.mark.asyncio
async def test_network_failure_keeps_form_open_with_values(product_form, fake_engine):
    product_form.set_value("name", "Widget")
    product_form.set_value("sku", "W-1")
    product_form.set_value("price", "9.99")
    fake_engine.fail = HttpError(409, "SKU already exists")

    with pytest.raises(HttpError):
        await product_form.submit()

    assert product_form.is_open
    assert product_form.error == "SKU already exists"
    assert product_form.values["price"] == "9.99"
    assert not product_form.is_submitting


@pytest.mark.asyncio
async def test_auth_error_propagates_untouched(product_form, fake_engine):
    product_form.set_value("name", "Widget")
    product_form.set_value("sku", "W-1")
    fake_engine.fail = AuthError("expired")
    with pytest.raises(AuthError):
        await product_form.submit()
    assert product_form.error is None


# ── Attachments ──


@pytest.mark.asyncio
async def test_photo_attachment_is_read_as_data_url(product_form, tmp_path):
    img = tmp_path / "shot.jpg"
    img.write_bytes(b"\xff\xd8jpeg")
    payload = await product_form.load_attachment("photo", str(img))
    assert payload == "data:image/jpeg;base64," + base64.b64encode(b"\xff\xd8jpeg").decode()
    assert product_form.values["photo"] == payload


@pytest.mark.asyncio
async def test_attachment_type_is_checked(product_form, tmp_path):
    doc = tmp_path / "notes.txt"
    doc.write_text("hi")
    with pytest.raises(ValidationError):
        await product_form.load_attachment("photo", str(doc))
    assert "Only" in product_form.error


@pytest.mark.asyncio
async def test_newer_attachment_read_supersedes_older(product_form, tmp_path):
    a = tmp_path / "a.jpg"
    b = tmp_path / "b.jpg"
    a.write_bytes(b"A")
    b.write_bytes(b"B")
    older = asyncio.ensure_future(product_form.load_attachment("photo", str(a)))
    await asyncio.sleep(0)
    newer = await product_form.load_attachment("photo", str(b))
    assert await older is None
    assert newer.endswith(base64.b64encode(b"B").decode())
    assert product_form.values["photo"] == newer


# ── Line items ──


@pytest.mark.asyncio
async def test_line_items_add_by_sku_update_remove_total():
    catalogue = {"W-1": {"name": "Widget", "sku": "W-1", "cost": 2.5}}

    async def lookup(sku):
        return catalogue.get(sku)

    editor = LineItemsEditor(lookup, amount_key="costo_por_articulo", source_field="cost")
    await editor.add_by_sku("W-1")
    await editor.add_by_sku("w-1")
    assert editor.lines == [{"nombre": "Widget", "sku": "W-1", "cantidad": 2, "costo_por_articulo": 2.5}]
    editor.update(0, cantidad="4")
    assert editor.total() == 10.0
    with pytest.raises(ValidationError):
        await editor.add_by_sku("missing")
    editor.remove(0)
    assert editor.lines == []
