"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising, and the Service Layer decides how to translate a
missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import structlog
from django.db import models, transaction

from modules.categories.models import Category
from modules.core.db import reset_identity
from modules.products.models import Product, ProductCategory
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def _queryset(self) -> "models.QuerySet[Product]":
        return Product.objects.prefetch_related("categories")

    def get_by_id(self, id: int) -> Optional[Product]:
        """Retrieve a product with its categories.

        Returns ``None`` for non-existent or malformed IDs.
        """
        try:
            return self._queryset().filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def get_by_name(self, name: str) -> Optional[Product]:
        return self._queryset().filter(name=name).first()

    def get_by_ids(self, ids: Iterable[int]) -> Dict[int, Product]:
        return {product.id: product for product in self._queryset().filter(id__in=set(ids))}

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Product]":
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"name__icontains": "ryzen"}
            {"categories__name": "CPU"}
        """
        queryset = self._queryset()
        if filters:
            queryset = queryset.filter(**filters).distinct()
        return queryset

    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product.

        Runs inside a savepoint so a unique-constraint violation leaves
        the surrounding transaction usable.
        """
        with transaction.atomic():
            entity.save()
        logger.info("product.saved", product_id=entity.id, name=entity.name)
        return entity

    @transaction.atomic
    def set_categories(self, product: Product, categories: Iterable[Category]) -> None:
        """Delete every association of ``product`` and insert the given set."""
        ProductCategory.objects.filter(product=product).delete()
        ProductCategory.objects.bulk_create(
            [ProductCategory(product=product, category=category) for category in categories]
        )
        # Drop any stale prefetch so callers see the new set.
        getattr(product, "_prefetched_objects_cache", {}).pop("categories", None)

    @transaction.atomic
    def delete(self, id: int) -> bool:
        """Hard-delete a product; associations go with it (CASCADE).

        Returns ``True`` if the product was found and deleted,
        ``False`` if no product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=id)
        return True

    @transaction.atomic
    def delete_all(self) -> int:
        """Delete every association, then every product, then reset the IDs."""
        associations, _ = ProductCategory.objects.all().delete()
        count, _ = Product.objects.all().delete()
        reset_identity(Product, ProductCategory)
        logger.info(
            "product.all_deleted",
            count=count,
            associations=associations,
        )
        return count
