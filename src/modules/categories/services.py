"""Category service layer (the category resolver).

Products refer to categories by name.  ``resolve_or_create`` is the
single place where a name becomes a persisted ``Category``; product
create, update and import all go through it.

The name lookup is check-then-act.  Two concurrent requests for the same
new name can both miss, in which case the database UNIQUE index rejects
the second insert and the resolver re-reads the row the winner created.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import IntegrityError

from modules.categories.constants import DEFAULT_DESCRIPTION, NAME_MAX_LENGTH
from modules.categories.exceptions import CategoryNotFound, InvalidCategory
from modules.categories.models import Category

if TYPE_CHECKING:
    from django.db import models

    from modules.categories.repositories.interfaces import ICategoryRepository

logger = structlog.get_logger(__name__)


class CategoryService:
    """Application service for Category use-cases.

    Receives an ``ICategoryRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICategoryRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_name(self, name: str) -> Optional[Category]:
        """Exact-match look-up; ``None`` when absent."""
        return self._repo.get_by_name(name)

    def list_categories(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Category]":
        return self._repo.list(filters)

    def get_category(self, id: int) -> Category:
        """Retrieve a single category by ID.

        Raises:
            CategoryNotFound: if the category does not exist.
        """
        category = self._repo.get_by_id(id)
        if not category:
            raise CategoryNotFound(f"Category {id} not found.")
        return category

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def resolve_or_create(self, name: str) -> Category:
        """Return the category called ``name``, creating it on a miss.

        New categories get ``DEFAULT_DESCRIPTION``.

        Raises:
            InvalidCategory: if ``name`` is blank or too long.
        """
        category, _ = self.get_or_create(name)
        return category

    def get_or_create(self, name: str) -> tuple[Category, bool]:
        """Like ``resolve_or_create`` but also reports whether a row was inserted."""
        name = self._normalise_name(name)

        existing = self._repo.get_by_name(name)
        if existing:
            return existing, False

        log = logger.bind(name=name)
        try:
            category = self._repo.save(
                Category(name=name, description=DEFAULT_DESCRIPTION)
            )
        except IntegrityError:
            # Lost the race against a concurrent insert of the same name.
            existing = self._repo.get_by_name(name)
            if existing is None:
                raise
            log.info("category.create_race_resolved", category_id=existing.id)
            return existing, False

        log.info("category.created", category_id=category.id)
        return category, True

    def delete_all(self) -> int:
        """Remove every category and restart the identifier sequence."""
        return self._repo.delete_all()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _normalise_name(name: Optional[str]) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidCategory("Category name must not be empty.")
        if len(name) > NAME_MAX_LENGTH:
            raise InvalidCategory(
                f"Category name must be at most {NAME_MAX_LENGTH} characters."
            )
        return name
