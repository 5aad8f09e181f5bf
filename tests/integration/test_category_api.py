"""Integration tests for Category API endpoints.

Covers:
- List and retrieve.
- Resolve-or-create semantics of POST (201 new, 200 existing).
- Validation (400) and not found (404).
"""

from __future__ import annotations

import pytest

from modules.categories.constants import DEFAULT_DESCRIPTION
from modules.categories.models import Category

pytestmark = pytest.mark.integration

URL = "/api/v1/categories/"


class TestCategoryList:
    def test_unauthenticated_returns_401(self, api_client):
        assert api_client.get(URL).status_code == 401

    def test_list(self, auth_client, category_service):
        category_service.resolve_or_create("CPU")
        category_service.resolve_or_create("GPU")

        response = auth_client.get(URL)

        assert response.status_code == 200
        assert [c["name"] for c in response.data["results"]] == ["CPU", "GPU"]


class TestCategoryRetrieve:
    def test_retrieve(self, auth_client, category_service):
        category = category_service.resolve_or_create("CPU")
        response = auth_client.get(f"{URL}{category.id}/")
        assert response.status_code == 200
        assert response.data["description"] == DEFAULT_DESCRIPTION

    def test_not_found(self, auth_client):
        response = auth_client.get(f"{URL}999/")
        assert response.status_code == 404
        assert response.data["detail"] == "Category not found."


class TestCategoryCreate:
    def test_new_category_returns_201(self, auth_client):
        response = auth_client.post(URL, {"name": "SSD"}, format="json")
        assert response.status_code == 201
        assert response.data["name"] == "SSD"
        assert Category.objects.count() == 1

    def test_existing_category_returns_200(self, auth_client, category_service):
        existing = category_service.resolve_or_create("SSD")

        response = auth_client.post(URL, {"name": "  SSD "}, format="json")

        assert response.status_code == 200
        assert response.data["id"] == existing.id
        assert Category.objects.count() == 1

    def test_blank_name_returns_400(self, auth_client):
        response = auth_client.post(URL, {"name": "   "}, format="json")
        assert response.status_code == 400

    def test_missing_name_returns_400(self, auth_client):
        response = auth_client.post(URL, {}, format="json")
        assert response.status_code == 400

    def test_long_name_returns_400(self, auth_client):
        response = auth_client.post(URL, {"name": "x" * 101}, format="json")
        assert response.status_code == 400
