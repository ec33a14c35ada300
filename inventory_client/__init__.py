"""
Inventory client: a PySide6 desktop front end for the inventory REST backend.

The package is split the same way on every page:
- api/       : transport, identity and one repository per resource
- modules/   : the generic resource list engine, entity forms and the
               per-resource pages built on top of them
- utils/     : logging, validation and Qt helpers
- widgets/   : shared Qt widgets
"""

__version__ = "0.1.0"
