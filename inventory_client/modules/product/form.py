from ..forms.fields import BlankPolicy, FieldKind, FormField, FormSchema

_NUM = dict(kind=FieldKind.FLOAT, blank=BlankPolicy.ZERO, min_value=0)

PRODUCT_SCHEMA = FormSchema(
    title="Product",
    fields=(
        FormField("name", "Name", required=True),
        FormField("sku", "SKU", required=True),
        FormField("category", "Category"),
        FormField("description", "Description"),
        FormField("price", "Price", **_NUM),
        FormField("cost", "Cost", **_NUM),
        FormField("stock", "Stock", **_NUM),
        FormField("weight_kg", "Weight (kg)", **_NUM),
        FormField("dimensions_cm.largo", "Length (cm)", **_NUM),
        FormField("dimensions_cm.ancho", "Width (cm)", **_NUM),
        FormField("dimensions_cm.alto", "Height (cm)", **_NUM),
        # blank or invalid pallet standard is left out of the request
        FormField("standard_tarima", "Units per pallet", kind=FieldKind.FLOAT, blank=BlankPolicy.OMIT),
        FormField("supplier.id", "Supplier", kind=FieldKind.RELATED),
        FormField(
            "photo", "Photo", kind=FieldKind.ATTACHMENT,
            accept=(".jpg", ".jpeg", ".png"), mime="image/jpeg",
        ),
    ),
)
