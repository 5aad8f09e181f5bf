"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from typing import Optional


class InvalidProduct(Exception):
    """The product payload is missing or a field is out of range."""


class ProductAlreadyExists(Exception):
    """A product with the same name already exists."""


class ProductNotFound(Exception):
    """The requested product does not exist."""


class InvalidImportPayload(Exception):
    """The import payload could not be decoded into a list of records."""


class ImportFailed(Exception):
    """Processing an import record failed unexpectedly.

    The original exception is chained as ``__cause__``.  Records before
    ``record_index`` may already be committed, depending on
    ``CATALOG_IMPORT_ATOMIC``.
    """

    def __init__(
        self, message: str, record_index: int, record_name: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.record_index = record_index
        self.record_name = record_name
