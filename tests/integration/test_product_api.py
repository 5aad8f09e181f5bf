"""Integration tests for Product API endpoints.

Covers:
- CRUD operations via /api/v1/products/.
- Domain exception mapping (400, 404, 409).
- PUT is a full replacement; PATCH is not routed.
- Filtering by category, name and price.
- Authentication enforcement (401 without token).
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.categories.constants import DEFAULT_DESCRIPTION
from modules.categories.models import Category
from modules.products.dtos import ProductInputDTO
from modules.products.models import Product, ProductCategory

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def sample_product(product_service):
    """A persisted Product linked to two categories."""
    return product_service.create_product(
        ProductInputDTO(
            name="Ryzen 7 7700X",
            description="Eight cores",
            price=Decimal("349.90"),
            quantity=12,
            categories=["CPU", "AMD"],
        )
    )


def _payload(**overrides) -> dict:
    data = {
        "name": "Core i5 13400",
        "description": "Ten cores",
        "price": "219.90",
        "quantity": 4,
        "categories": ["CPU", "Intel"],
    }
    data.update(overrides)
    return data


# ===========================================================================
# Authentication
# ===========================================================================


class TestProductAPIAuth:
    def test_unauthenticated_returns_401(self, api_client):
        response = api_client.get(URL)
        assert response.status_code == 401

    def test_unauthenticated_write_returns_401(self, api_client):
        response = api_client.post(URL, _payload(), format="json")
        assert response.status_code == 401
        assert Product.objects.count() == 0


# ===========================================================================
# LIST / RETRIEVE
# ===========================================================================


class TestProductList:
    def test_list_empty(self, auth_client):
        response = auth_client.get(URL)
        assert response.status_code == 200
        assert response.data["results"] == []

    def test_list_returns_products_with_categories(self, auth_client, sample_product):
        response = auth_client.get(URL)
        assert response.status_code == 200
        assert response.data["count"] == 1
        item = response.data["results"][0]
        assert item["name"] == "Ryzen 7 7700X"
        assert item["price"] == "349.90"
        assert sorted(item["categories"]) == ["AMD", "CPU"]


class TestProductFilters:
    @pytest.fixture(autouse=True)
    def _catalog(self, product_service, sample_product):
        product_service.create_product(
            ProductInputDTO(name="RTX 4060", price=Decimal("299.00"), categories=["GPU"])
        )

    def test_filter_by_category(self, auth_client):
        response = auth_client.get(URL, {"category": "cpu"})
        assert [p["name"] for p in response.data["results"]] == ["Ryzen 7 7700X"]

    def test_filter_by_name(self, auth_client):
        response = auth_client.get(URL, {"name": "rtx"})
        assert [p["name"] for p in response.data["results"]] == ["RTX 4060"]

    def test_filter_by_price_range(self, auth_client):
        response = auth_client.get(URL, {"min_price": "300", "max_price": "400"})
        assert [p["name"] for p in response.data["results"]] == ["Ryzen 7 7700X"]


class TestProductRetrieve:
    def test_retrieve(self, auth_client, sample_product):
        response = auth_client.get(f"{URL}{sample_product.id}/")
        assert response.status_code == 200
        assert response.data["id"] == sample_product.id
        assert response.data["description"] == "Eight cores"

    def test_retrieve_not_found(self, auth_client):
        response = auth_client.get(f"{URL}999/")
        assert response.status_code == 404
        assert response.data["detail"] == "Product not found."

    def test_retrieve_malformed_id(self, auth_client):
        response = auth_client.get(f"{URL}abc/")
        assert response.status_code == 404


# ===========================================================================
# CREATE
# ===========================================================================


class TestProductCreate:
    def test_create_success(self, auth_client):
        response = auth_client.post(URL, _payload(), format="json")

        assert response.status_code == 201
        assert response.data["name"] == "Core i5 13400"
        assert response.data["price"] == "219.90"
        assert sorted(response.data["categories"]) == ["CPU", "Intel"]
        assert Category.objects.filter(name="Intel").exists()

    def test_create_without_description_gets_default(self, auth_client):
        response = auth_client.post(URL, _payload(description=None), format="json")
        assert response.status_code == 201
        assert response.data["description"] == DEFAULT_DESCRIPTION

    def test_create_reuses_existing_category(self, auth_client, sample_product):
        response = auth_client.post(URL, _payload(), format="json")
        assert response.status_code == 201
        assert Category.objects.filter(name="CPU").count() == 1

    def test_create_duplicate_name_returns_409(self, auth_client, sample_product):
        response = auth_client.post(URL, _payload(name="Ryzen 7 7700X"), format="json")
        assert response.status_code == 409
        assert Product.objects.count() == 1

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": "0.00"},
            {"price": "10000.01"},
            {"quantity": -1},
            {"name": ""},
            {"name": "x" * 101},
        ],
    )
    def test_create_invalid_returns_400(self, auth_client, overrides):
        response = auth_client.post(URL, _payload(**overrides), format="json")
        assert response.status_code == 400
        assert "detail" in response.data
        assert Product.objects.count() == 0

    def test_create_non_object_returns_400(self, auth_client):
        response = auth_client.post(URL, [1, 2], format="json")
        assert response.status_code == 400

    def test_create_with_blank_category_names_ignored(self, auth_client):
        response = auth_client.post(
            URL, _payload(categories=["CPU", " ", "CPU"]), format="json"
        )
        assert response.status_code == 201
        assert response.data["categories"] == ["CPU"]

    def test_create_with_overlong_category_returns_400(self, auth_client):
        response = auth_client.post(URL, _payload(categories=["c" * 101]), format="json")
        assert response.status_code == 400
        assert "at most 100" in response.data["detail"]
        assert Product.objects.count() == 0
        assert Category.objects.count() == 0


# ===========================================================================
# UPDATE
# ===========================================================================


class TestProductUpdate:
    def test_put_replaces_all_fields(self, auth_client, sample_product):
        response = auth_client.put(
            f"{URL}{sample_product.id}/",
            _payload(name="Renamed", categories=["GPU"]),
            format="json",
        )

        assert response.status_code == 200
        assert response.data["name"] == "Renamed"
        assert response.data["quantity"] == 4
        assert response.data["categories"] == ["GPU"]
        assert ProductCategory.objects.filter(product_id=sample_product.id).count() == 1

    def test_put_without_description_resets_to_default(self, auth_client, sample_product):
        payload = _payload()
        del payload["description"]
        response = auth_client.put(f"{URL}{sample_product.id}/", payload, format="json")
        assert response.status_code == 200
        assert response.data["description"] == DEFAULT_DESCRIPTION

    def test_put_keeps_orphaned_categories(self, auth_client, sample_product):
        auth_client.put(
            f"{URL}{sample_product.id}/", _payload(categories=[]), format="json"
        )
        assert Category.objects.filter(name="AMD").exists()

    def test_put_not_found(self, auth_client):
        response = auth_client.put(f"{URL}999/", _payload(), format="json")
        assert response.status_code == 404

    def test_put_invalid_returns_400(self, auth_client, sample_product):
        response = auth_client.put(
            f"{URL}{sample_product.id}/", _payload(price="0"), format="json"
        )
        assert response.status_code == 400

    def test_put_with_overlong_category_returns_400(self, auth_client, sample_product):
        response = auth_client.put(
            f"{URL}{sample_product.id}/", _payload(categories=["c" * 101]), format="json"
        )
        assert response.status_code == 400
        sample_product.refresh_from_db()
        assert sample_product.name == "Ryzen 7 7700X"
        assert sorted(sample_product.category_names()) == ["AMD", "CPU"]

    def test_put_name_collision_returns_409(self, auth_client, sample_product, product_service):
        other = product_service.create_product(
            ProductInputDTO(name="Other", price=Decimal("1.00"))
        )
        response = auth_client.put(
            f"{URL}{other.id}/", _payload(name="Ryzen 7 7700X"), format="json"
        )
        assert response.status_code == 409

    def test_patch_not_allowed(self, auth_client, sample_product):
        response = auth_client.patch(
            f"{URL}{sample_product.id}/", {"quantity": 1}, format="json"
        )
        assert response.status_code == 405


# ===========================================================================
# DELETE
# ===========================================================================


class TestProductDelete:
    def test_delete(self, auth_client, sample_product):
        response = auth_client.delete(f"{URL}{sample_product.id}/")
        assert response.status_code == 204
        assert not Product.objects.filter(id=sample_product.id).exists()
        assert ProductCategory.objects.count() == 0
        assert Category.objects.count() == 2

    def test_delete_not_found(self, auth_client):
        response = auth_client.delete(f"{URL}999/")
        assert response.status_code == 404
