"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository`` and category
resolution to the injected ``CategoryService``.

Business rules enforced here:
- Product name must be unique (pre-check + UNIQUE INDEX backstop).
- Empty descriptions become ``DEFAULT_DESCRIPTION``.
- Price within [0.01, 10000.00], quantity non-negative.
- Category names resolve to existing categories or are created.
- Basket discount: 5% of the unit price for "CPU" products bought two
  or more at a time.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from modules.categories.constants import DEFAULT_DESCRIPTION
from modules.products.constants import (
    DISCOUNT_CATEGORY,
    DISCOUNT_MIN_QUANTITY,
    DISCOUNT_RATE,
)
from modules.products.dtos import DiscountDetailDTO
from modules.products.exceptions import (
    InvalidProduct,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from django.db import models

    from modules.categories.models import Category
    from modules.categories.services import CategoryService
    from modules.products.dtos import BasketItemDTO, ProductInputDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` and a ``CategoryService`` via
    constructor injection (DIP).  Holds no state between calls.
    """

    def __init__(
        self,
        repository: IProductRepository,
        category_service: CategoryService,
    ) -> None:
        self._repo = repository
        self._categories = category_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: Optional[ProductInputDTO]) -> Product:
        """Create a product and link its categories.

        Category names that already exist are bound to the existing row;
        unknown names are created in the same transaction as the product.

        Raises:
            InvalidProduct: if ``dto`` is missing or a field is out of range.
            ProductAlreadyExists: if the name is already taken.
        """
        if dto is None:
            raise InvalidProduct("Product payload is required.")

        log = logger.bind(name=dto.name)

        if self._repo.get_by_name(dto.name):
            log.warning("product.duplicate_name")
            raise ProductAlreadyExists(f"Product '{dto.name}' already exists.")

        product = Product(
            name=dto.name,
            description=dto.description,
            price=dto.price,
            quantity=dto.quantity,
        )
        product = self._persist(product)
        self._repo.set_categories(product, self._resolve_categories(dto.categories))

        log.info("product.created", product_id=product.id, categories=dto.categories)
        return product

    @transaction.atomic
    def update_product(self, id: int, dto: Optional[ProductInputDTO]) -> Product:
        """Overwrite every field of a product and replace its categories.

        This is a full replacement: fields absent from ``dto`` take their
        defaults, and the association set becomes exactly ``dto.categories``.

        Raises:
            InvalidProduct: if ``dto`` is missing or a field is out of range.
            ProductNotFound: if the product does not exist.
            ProductAlreadyExists: if the new name belongs to another product.
        """
        if dto is None:
            raise InvalidProduct("Product payload is required.")

        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        product.name = dto.name
        product.description = dto.description
        product.price = dto.price
        product.quantity = dto.quantity

        product = self._persist(product)
        self._repo.set_categories(product, self._resolve_categories(dto.categories))

        logger.info(
            "product.updated",
            product_id=product.id,
            categories=dto.categories,
        )
        return product

    @transaction.atomic
    def save_product(self, product: Optional[Product]) -> Product:
        """Persist an already-loaded product, leaving its categories alone.

        Raises:
            InvalidProduct: if ``product`` is missing or a field is out of range.
            ProductAlreadyExists: if the name collides with another product.
        """
        if product is None:
            raise InvalidProduct("Product is required.")
        return self._persist(product)

    @transaction.atomic
    def delete_product(self, id: int) -> None:
        """Delete a product and, by cascade, its category associations.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        self._repo.delete(product.id)
        logger.info("product.deleted", product_id=id)

    @transaction.atomic
    def clear_catalog(self) -> None:
        """Remove associations, products and categories; restart IDs at 1.

        The order follows the foreign keys: associations first, then
        products, then categories.
        """
        products = self._repo.delete_all()
        categories = self._categories.delete_all()
        logger.info("catalog.cleared", products=products, categories=categories)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """Return products with their categories, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: int) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.retrieved", product_id=id)
        return product

    def find_by_name(self, name: str) -> Optional[Product]:
        return self._repo.get_by_name(name)

    def get_products_by_ids(self, ids: Iterable[int]) -> List[Product]:
        ids = list(ids)
        found = self._repo.get_by_ids(ids)
        return [found[id] for id in ids if id in found]

    # ------------------------------------------------------------------
    # Discounts
    # ------------------------------------------------------------------

    def calculate_discount(self, items: Iterable[BasketItemDTO]) -> List[DiscountDetailDTO]:
        """Compute the per-item discount of a basket.

        One ``DiscountDetailDTO`` per item, in basket order.  Items naming
        a product that does not exist are left out; items that do not
        qualify are reported with a zero discount.  Discounts are exact
        products of price and rate; nothing is rounded.
        """
        items = list(items)
        products = self._repo.get_by_ids(item.product_id for item in items)

        details: List[DiscountDetailDTO] = []
        for item in items:
            product = products.get(item.product_id)
            if product is None:
                logger.info("discount.unknown_product", product_id=item.product_id)
                continue
            details.append(
                DiscountDetailDTO(
                    product_id=product.id,
                    discount=self._discount_for(product, item.quantity),
                )
            )
        return details

    def total_discount(self, items: Iterable[BasketItemDTO]) -> Decimal:
        """Sum of ``calculate_discount`` over the basket."""
        return self.sum_discounts(self.calculate_discount(items))

    @staticmethod
    def sum_discounts(details: Iterable[DiscountDetailDTO]) -> Decimal:
        return sum((detail.discount for detail in details), Decimal("0.00"))

    @staticmethod
    def _discount_for(product: Product, quantity: int) -> Decimal:
        if quantity >= DISCOUNT_MIN_QUANTITY and product.in_category(DISCOUNT_CATEGORY):
            return product.price * DISCOUNT_RATE
        return Decimal("0.00")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_categories(self, names: Iterable[str]) -> List[Category]:
        return [self._categories.resolve_or_create(name) for name in names]

    def _persist(self, product: Product) -> Product:
        """Default the description, validate field ranges and save.

        A UNIQUE violation raised by the database (e.g. a concurrent
        create with the same name) is reported as ``ProductAlreadyExists``.
        """
        if not product.description:
            product.description = DEFAULT_DESCRIPTION

        try:
            product.full_clean(validate_unique=False, validate_constraints=False)
        except DjangoValidationError as exc:
            raise InvalidProduct(_format_errors(exc)) from exc

        try:
            return self._repo.save(product)
        except IntegrityError as exc:
            logger.warning("product.integrity_error", name=product.name, error=str(exc))
            raise ProductAlreadyExists(
                f"Product '{product.name}' already exists."
            ) from exc


def _format_errors(exc: DjangoValidationError) -> str:
    if hasattr(exc, "message_dict"):
        return "; ".join(
            f"{field}: {' '.join(messages)}" for field, messages in exc.message_dict.items()
        )
    return " ".join(exc.messages)
