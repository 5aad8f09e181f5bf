"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer and the Service
layer.  DTOs are immutable (``frozen=True``).

- ``ProductInputDTO``: input for product create and full update.
- ``ProductImportRecordDTO``: one record of a bulk import.
- ``ImportSummaryDTO``: outcome of a bulk import.
- ``BasketItemDTO`` / ``DiscountDetailDTO``: discount calculation I/O.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    computed_field,
    field_validator,
)

from modules.categories.constants import NAME_MAX_LENGTH
from modules.products.constants import PRICE_MAX, PRICE_MIN


def _check_price(v: Decimal) -> Decimal:
    if v < PRICE_MIN or v > PRICE_MAX:
        raise ValueError(f"Price must be between {PRICE_MIN} and {PRICE_MAX}.")
    return v


def _check_name(v: str) -> str:
    v = (v or "").strip()
    if not v:
        raise ValueError("Product name is required.")
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(
            f"Product name must be at most {NAME_MAX_LENGTH} characters."
        )
    return v


def _check_quantity(v: int) -> int:
    if v < 0:
        raise ValueError("Quantity must be a non-negative number.")
    return v


def _clean_category_names(v: Optional[List[str]]) -> List[str]:
    """Strip names, drop blanks and collapse duplicates keeping first-seen order."""
    names: List[str] = []
    for raw in v or []:
        name = raw.strip()
        if name and name not in names:
            names.append(name)
    return names


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class ProductInputDTO(BaseModel):
    """Immutable DTO for product create and full-update requests.

    Validates:
    - ``name`` is non-empty and at most 100 characters.
    - ``price`` lies within [0.01, 10000.00].
    - ``quantity`` is non-negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    description: Optional[str] = None
    quantity: int = 0
    categories: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_must_be_valid(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("price")
    @classmethod
    def price_must_be_in_range(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        return _check_quantity(v)

    @field_validator("categories", mode="before")
    @classmethod
    def categories_default_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("categories")
    @classmethod
    def clean_categories(cls, v: List[str]) -> List[str]:
        return _clean_category_names(v)


class ProductImportRecordDTO(BaseModel):
    """One record of an externally supplied import batch.

    Same shape as ``ProductInputDTO``.  The price range is not checked
    here: a record for a product that already exists only contributes its
    quantity, so its price is never used.  ``to_product_input`` applies
    the full rules when the record creates a product.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    price: Decimal
    description: Optional[str] = None
    quantity: int = 0
    categories: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def name_must_be_valid(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_non_negative(cls, v: int) -> int:
        return _check_quantity(v)

    @field_validator("categories", mode="before")
    @classmethod
    def categories_default_to_empty(cls, v):
        return [] if v is None else v

    @field_validator("categories")
    @classmethod
    def clean_categories(cls, v: List[str]) -> List[str]:
        return _clean_category_names(v)

    def to_product_input(self) -> ProductInputDTO:
        """Raises pydantic ``ValidationError`` if the price is out of range."""
        return ProductInputDTO(**self.model_dump())


class BasketItemDTO(BaseModel):
    """A requested quantity of one product; never persisted."""

    model_config = ConfigDict(frozen=True)

    product_id: int
    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


ImportRecordList = TypeAdapter(List[ProductImportRecordDTO])
BasketItemList = TypeAdapter(List[BasketItemDTO])


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class DiscountDetailDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: int
    discount: Decimal


class ImportSummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    created: int
    updated: int
    atomic: bool

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total(self) -> int:
        return self.created + self.updated
