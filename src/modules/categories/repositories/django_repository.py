"""Django ORM implementation of the Category repository.

Look-ups return ``None`` for missing rows; the Service Layer decides
what a miss means.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.db import models, transaction

from modules.categories.models import Category
from modules.categories.repositories.interfaces import ICategoryRepository
from modules.core.db import reset_identity

logger = structlog.get_logger(__name__)


class CategoryDjangoRepository(ICategoryRepository):
    """Concrete Category repository backed by Django ORM."""

    def get_by_id(self, id: int) -> Optional[Category]:
        try:
            return Category.objects.filter(id=id).first()
        except (TypeError, ValueError):
            return None

    def get_by_name(self, name: str) -> Optional[Category]:
        return Category.objects.filter(name=name).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Category]":
        queryset = Category.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def save(self, entity: Category) -> Category:
        """Persist (create or update) a category.

        Runs inside a savepoint so a unique-constraint violation leaves
        the surrounding transaction usable.
        """
        with transaction.atomic():
            entity.save()
        logger.info("category.saved", category_id=entity.id, name=entity.name)
        return entity

    @transaction.atomic
    def delete(self, id: int) -> bool:
        category = self.get_by_id(id)
        if not category:
            return False
        category.delete()
        logger.info("category.deleted", category_id=id)
        return True

    @transaction.atomic
    def delete_all(self) -> int:
        count, _ = Category.objects.all().delete()
        reset_identity(Category)
        logger.info("category.all_deleted", count=count)
        return count
