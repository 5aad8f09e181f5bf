"""Category model.

Business rules implemented:
- Category name is unique across the catalog (UNIQUE INDEX).
- Description falls back to ``DEFAULT_DESCRIPTION``.
"""

from __future__ import annotations

from django.db import models

from modules.categories.constants import DEFAULT_DESCRIPTION, NAME_MAX_LENGTH
from modules.core.models import BaseModel


class Category(BaseModel):
    name = models.CharField(max_length=NAME_MAX_LENGTH, unique=True)
    description = models.TextField(blank=True, default=DEFAULT_DESCRIPTION)

    class Meta:
        db_table = "categories"
        ordering = ["id"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:
        return self.name
