"""Product model and its category association.

Business rules implemented:
- Product name must be unique in the catalog.
- Price must lie within [0.01, 10000.00] (validators + DB constraint).
- Quantity cannot be negative (PositiveIntegerField).
- Deleting a product removes its category associations (CASCADE).
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.categories.constants import DEFAULT_DESCRIPTION, NAME_MAX_LENGTH
from modules.categories.models import Category
from modules.core.models import BaseModel
from modules.products.constants import PRICE_MAX, PRICE_MIN


class Product(BaseModel):
    """Product aggregate root.

    ``unique=True`` on ``name`` creates a UNIQUE INDEX, which is the
    authoritative guard against duplicate names under concurrent writes.
    """

    name = models.CharField(max_length=NAME_MAX_LENGTH, unique=True)
    description = models.TextField(blank=True, default=DEFAULT_DESCRIPTION)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(PRICE_MIN), MaxValueValidator(PRICE_MAX)],
    )
    quantity = models.PositiveIntegerField(default=0)
    categories = models.ManyToManyField(
        Category,
        through="ProductCategory",
        related_name="products",
        blank=True,
    )

    class Meta:
        db_table = "products"
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=PRICE_MIN, price__lte=PRICE_MAX),
                name="products_price_in_range",
            ),
        ]

    # ------------------------------------------------------------------
    # Domain helpers
    # ------------------------------------------------------------------

    def category_names(self) -> list[str]:
        """Names of the linked categories (uses the prefetch cache if present)."""
        return [category.name for category in self.categories.all()]

    def in_category(self, name: str) -> bool:
        return name in self.category_names()

    def __str__(self) -> str:
        return self.name


class ProductCategory(models.Model):
    """Join row between one product and one category.

    Identity is the ``(product, category)`` pair; rows are only ever
    created and destroyed through the owning product's association set.
    """

    product = models.ForeignKey(
        Product,
        on_delete=models.CASCADE,
        related_name="product_categories",
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.CASCADE,
        related_name="product_categories",
    )

    class Meta:
        db_table = "product_categories"
        constraints = [
            models.UniqueConstraint(
                fields=["product", "category"],
                name="product_categories_unique_pair",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.product_id}:{self.category_id}"
