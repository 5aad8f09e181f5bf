"""Bulk product import (create-or-restock reconciliation).

Merges an externally supplied list of product records into the catalog:

- a record whose name is unknown becomes a new product (categories are
  resolved by name, a missing description gets the default);
- a record whose name exists only adds its quantity to the stored
  quantity; name, price, description and categories are left untouched.

Records are processed in input order and the first failure stops the
batch.  Whether the records committed before the failure survive is an
explicit choice made with ``atomic``:

- ``atomic=False``: every record commits on its own, earlier records
  stay committed.
- ``atomic=True``: the whole batch is one transaction and rolls back.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Iterable, List, Union

import structlog
from django.db import transaction
from pydantic import ValidationError as PydanticValidationError

from modules.products.dtos import ImportRecordList, ImportSummaryDTO
from modules.products.exceptions import ImportFailed, InvalidImportPayload

if TYPE_CHECKING:
    from modules.products.dtos import ProductImportRecordDTO
    from modules.products.services import ProductService

logger = structlog.get_logger(__name__)

Payload = Union[bytes, str, List[Any]]


class ProductImportService:
    """Application service for the bulk import use-case."""

    def __init__(self, product_service: ProductService, atomic: bool = False) -> None:
        self._products = product_service
        self._atomic = atomic

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    @staticmethod
    def parse(payload: Payload) -> List[ProductImportRecordDTO]:
        """Decode a JSON document (or already-decoded list) into records.

        Raises:
            InvalidImportPayload: if the payload is not valid JSON or is
                not a list of well-formed product records.
        """
        try:
            if isinstance(payload, (bytes, bytearray, str)):
                return ImportRecordList.validate_json(payload)
            return ImportRecordList.validate_python(payload)
        except PydanticValidationError as exc:
            logger.warning("import.invalid_payload", errors=exc.error_count())
            raise InvalidImportPayload(
                f"Error deserializing import payload: {_first_error(exc)}"
            ) from exc

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def import_payload(self, payload: Payload) -> ImportSummaryDTO:
        """``parse`` then ``import_records``."""
        return self.import_records(self.parse(payload))

    def import_records(self, records: Iterable[ProductImportRecordDTO]) -> ImportSummaryDTO:
        """Merge ``records`` into the catalog.

        Raises:
            ImportFailed: when a record cannot be processed; the original
                exception is chained as ``__cause__``.
        """
        records = list(records)
        log = logger.bind(records=len(records), atomic=self._atomic)
        log.info("import.started")

        if self._atomic:
            with transaction.atomic():
                created, updated = self._process(records)
        else:
            created, updated = self._process(records)

        summary = ImportSummaryDTO(created=created, updated=updated, atomic=self._atomic)
        log.info("import.completed", created=created, updated=updated)
        return summary

    def _process(self, records: List[ProductImportRecordDTO]) -> tuple[int, int]:
        created = updated = 0
        for index, record in enumerate(records):
            try:
                if self._import_one(record):
                    created += 1
                else:
                    updated += 1
            except Exception as exc:
                logger.error(
                    "import.record_failed",
                    index=index,
                    name=record.name,
                    error=str(exc),
                    committed=0 if self._atomic else index,
                )
                raise ImportFailed(
                    f"Import failed at record {index} ('{record.name}'): {exc}",
                    record_index=index,
                    record_name=record.name,
                ) from exc
        return created, updated

    def _import_one(self, record: ProductImportRecordDTO) -> bool:
        """Apply one record; ``True`` if a product was created."""
        existing = self._products.find_by_name(record.name)
        if existing is None:
            self._products.create_product(record.to_product_input())
            return True

        existing.quantity += record.quantity
        self._products.save_product(existing)
        logger.info(
            "import.restocked",
            product_id=existing.id,
            added=record.quantity,
            quantity=existing.quantity,
        )
        return False


def _first_error(exc: PydanticValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    return f"{location}: {error['msg']}" if location else error["msg"]


def decode_upload(raw: bytes) -> Any:
    """Decode an uploaded JSON file into Python data.

    Raises:
        InvalidImportPayload: if the bytes are not UTF-8 JSON.
    """
    try:
        return json.loads(raw.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidImportPayload(f"Error deserializing JSON: {exc}") from exc
