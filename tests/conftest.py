import pytest
from django.contrib.auth import get_user_model

from rest_framework.test import APIClient

from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="testuser", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def category_service():
    """CategoryService wired to the Django repository."""
    return CategoryService(repository=CategoryDjangoRepository())


@pytest.fixture()
def product_service(category_service):
    """ProductService wired to the Django repositories."""
    return ProductService(
        repository=ProductDjangoRepository(),
        category_service=category_service,
    )
