from .controller import AttachmentReader, EntityFormController, LineItemsEditor, check_lines
from .fields import BlankPolicy, FieldKind, FormField, FormSchema

__all__ = [
    "AttachmentReader",
    "EntityFormController",
    "LineItemsEditor",
    "check_lines",
    "BlankPolicy",
    "FieldKind",
    "FormField",
    "FormSchema",
]
