"""Performance regression tests: constant query count (N+1 prevention).

Verifies that list, retrieve and discount endpoints execute a bounded
number of SQL queries regardless of the number of records, proving that
``prefetch_related("categories")`` is applied.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.dtos import ProductInputDTO

pytestmark = pytest.mark.integration


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def products(product_service):
    return [
        product_service.create_product(
            ProductInputDTO(
                name=f"Product {i}",
                price=Decimal("10.00"),
                quantity=100,
                categories=["CPU", f"Line {i % 3}"],
            )
        )
        for i in range(10)
    ]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


class TestProductListQueryCount:
    def test_list_query_count_is_constant(
        self, auth_client, products, django_assert_max_num_queries
    ):
        """GET /api/v1/products/ should not increase queries with more records.

        Expected queries (bounded):
        1. COUNT for pagination
        2. SELECT products
        3. SELECT categories for the page (prefetch_related)
        """
        with django_assert_max_num_queries(5):
            response = auth_client.get("/api/v1/products/")

        assert response.status_code == 200
        assert response.data["count"] == 10
        assert all(len(p["categories"]) == 2 for p in response.data["results"])


class TestProductRetrieveQueryCount:
    def test_retrieve_query_count_is_constant(
        self, auth_client, products, django_assert_max_num_queries
    ):
        with django_assert_max_num_queries(3):
            response = auth_client.get(f"/api/v1/products/{products[0].id}/")

        assert response.status_code == 200


class TestDiscountQueryCount:
    def test_discount_does_not_query_per_item(
        self, auth_client, products, django_assert_max_num_queries
    ):
        basket = [{"product_id": p.id, "quantity": 2} for p in products]

        with django_assert_max_num_queries(3):
            response = auth_client.post(
                "/api/v1/products/calculate-discount/", basket, format="json"
            )

        assert response.status_code == 200
        assert Decimal(response.data["total_discount"]) == Decimal("5")
