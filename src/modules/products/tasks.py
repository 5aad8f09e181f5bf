"""Background tasks for the products module."""

from typing import Any, List

import structlog
from celery import shared_task
from django.conf import settings

from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.products.importer import ProductImportService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

logger = structlog.get_logger(__name__)


def build_import_service() -> ProductImportService:
    """Wire an import service against the Django repositories."""
    product_service = ProductService(
        repository=ProductDjangoRepository(),
        category_service=CategoryService(repository=CategoryDjangoRepository()),
    )
    return ProductImportService(product_service, atomic=settings.CATALOG_IMPORT_ATOMIC)


@shared_task(name="products.import_products")
def import_products(records: List[Any]) -> dict:
    """Run a product import outside the request cycle.

    ``records`` is the decoded JSON list; the summary is returned as a
    plain dict so it survives the JSON result backend.
    """
    summary = build_import_service().import_payload(records)
    logger.info("import_task.executed", **summary.model_dump())
    return summary.model_dump()
