"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups and association
writes the Product Service needs.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.categories.models import Category
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Product]":
        """List products (categories prefetched) with optional filters."""

    @abstractmethod
    def get_by_ids(self, ids: Iterable[int]) -> Dict[int, "Product"]:
        """Fetch several products in one query, keyed by ID."""

    @abstractmethod
    def set_categories(
        self, product: "Product", categories: Iterable["Category"]
    ) -> None:
        """Replace the product's whole association set."""
