"""Unit tests for CategoryService.

Covers:
- resolve_or_create / get_or_create: existing, new (default description),
  name trimming, concurrent-insert race resolution.
- Invalid names: blank, whitespace, too long.
- get_category: happy path, not found.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from django.db import IntegrityError

from modules.categories.constants import DEFAULT_DESCRIPTION
from modules.categories.exceptions import CategoryNotFound, InvalidCategory
from modules.categories.models import Category
from modules.categories.services import CategoryService

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.save.side_effect = lambda c: c
    return repo


@pytest.fixture()
def service(mock_repo):
    return CategoryService(repository=mock_repo)


# ===========================================================================
# resolve_or_create
# ===========================================================================


class TestResolveOrCreate:
    def test_returns_existing(self, service, mock_repo):
        existing = Category(id=3, name="CPU")
        mock_repo.get_by_name.return_value = existing

        assert service.resolve_or_create("CPU") is existing
        mock_repo.save.assert_not_called()

    def test_creates_with_default_description(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None

        category, created = service.get_or_create("GPU")

        assert created is True
        assert category.name == "GPU"
        assert category.description == DEFAULT_DESCRIPTION
        mock_repo.save.assert_called_once()

    def test_name_is_trimmed(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None
        category = service.resolve_or_create("  RAM  ")
        mock_repo.get_by_name.assert_called_once_with("RAM")
        assert category.name == "RAM"

    def test_existing_reports_not_created(self, service, mock_repo):
        mock_repo.get_by_name.return_value = Category(id=1, name="CPU")
        _, created = service.get_or_create("CPU")
        assert created is False

    def test_lost_race_returns_winner(self, service, mock_repo):
        winner = Category(id=9, name="SSD")
        mock_repo.get_by_name.side_effect = [None, winner]
        mock_repo.save.side_effect = IntegrityError("UNIQUE constraint failed")

        category, created = service.get_or_create("SSD")

        assert category is winner
        assert created is False

    def test_integrity_error_without_winner_propagates(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None
        mock_repo.save.side_effect = IntegrityError("boom")

        with pytest.raises(IntegrityError):
            service.resolve_or_create("SSD")


class TestInvalidNames:
    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name_rejected(self, service, mock_repo, name):
        with pytest.raises(InvalidCategory, match="must not be empty"):
            service.resolve_or_create(name)
        mock_repo.get_by_name.assert_not_called()

    def test_long_name_rejected(self, service):
        with pytest.raises(InvalidCategory, match="at most 100"):
            service.resolve_or_create("x" * 101)

    def test_hundred_characters_accepted(self, service, mock_repo):
        mock_repo.get_by_name.return_value = None
        assert service.resolve_or_create("x" * 100).name == "x" * 100


# ===========================================================================
# Queries
# ===========================================================================


class TestGetCategory:
    def test_success(self, service, mock_repo):
        category = Category(id=1, name="CPU")
        mock_repo.get_by_id.return_value = category
        assert service.get_category(1) is category

    def test_not_found(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None
        with pytest.raises(CategoryNotFound):
            service.get_category(1)
