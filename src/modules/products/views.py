"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes.  The view never swallows generic exceptions;
those reach ``ErrorHandlingMiddleware``.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.categories.exceptions import InvalidCategory
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.services import CategoryService
from modules.products import tasks
from modules.products.dtos import BasketItemList, ProductInputDTO
from modules.products.exceptions import (
    ImportFailed,
    InvalidImportPayload,
    InvalidProduct,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.filters import ProductFilter
from modules.products.importer import ProductImportService, decode_upload
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService

_TRUTHY = {"1", "true", "yes", "on"}


def _product_input(data: Any) -> ProductInputDTO:
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object.")
    return ProductInputDTO(
        name=data.get("name", ""),
        price=data.get("price", 0),
        description=data.get("description"),
        quantity=data.get("quantity", 0),
        categories=data.get("categories") or [],
    )


def _not_found() -> Response:
    return Response(
        {"detail": "Product not found."},
        status=status.HTTP_404_NOT_FOUND,
    )


class ProductViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Product CRUD, discounts, import and catalog reset.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.  Updates are full replacements, so
    only PUT is routed.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "price", "quantity"]
    ordering = ["id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.all()
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            category_service=CategoryService(repository=CategoryDjangoRepository()),
        )
        self._importer = ProductImportService(
            self._service, atomic=settings.CATALOG_IMPORT_ATOMIC
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        return self._service.list_products()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        try:
            dto = _product_input(request.data)
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.create_product(dto)
        except (InvalidProduct, InvalidCategory) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except ProductAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/"""
        try:
            dto = _product_input(request.data)
        except (PydanticValidationError, ValueError) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            product = self._service.update_product(pk, dto)
        except ProductNotFound:
            return _not_found()
        except (InvalidProduct, InvalidCategory) as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except ProductAlreadyExists as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_409_CONFLICT,
            )

        out = ProductSerializer(product)
        return Response(out.data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk)
        except ProductNotFound:
            return _not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Discounts
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], url_path="calculate-discount")
    def calculate_discount(self, request: Request) -> Response:
        """POST /api/v1/products/calculate-discount/

        Accepts ``[{"product_id": 1, "quantity": 2}, ...]`` (or the same
        list under an ``items`` key) and returns the per-product
        discounts plus their total.
        """
        data = request.data
        if isinstance(data, dict) and "items" in data:
            data = data["items"]

        try:
            items = BasketItemList.validate_python(data)
        except PydanticValidationError as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        details = self._service.calculate_discount(items)
        return Response(
            {
                "items": [detail.model_dump(mode="json") for detail in details],
                "total_discount": str(ProductService.sum_discounts(details)),
            }
        )

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    @action(
        detail=False,
        methods=["post"],
        url_path="import",
        parser_classes=[MultiPartParser, FormParser, JSONParser],
    )
    def import_products(self, request: Request) -> Response:
        """POST /api/v1/products/import/

        Takes a JSON document either as the multipart ``file`` field or as
        the request body.  With ``?background=true`` the import is queued
        on Celery and 202 is returned with the task id.
        """
        upload = request.FILES.get("file")
        if upload is not None:
            if upload.size == 0:
                return Response(
                    {"detail": "No file uploaded."},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            if upload.size > settings.CATALOG_IMPORT_MAX_BYTES:
                return Response(
                    {"detail": "Import file is too large."},
                    status=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                )
            raw: Any = upload.read()
        elif isinstance(request.data, list):
            raw = request.data
        else:
            return Response(
                {"detail": "No file uploaded."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            data = decode_upload(raw) if isinstance(raw, bytes) else raw
            records = self._importer.parse(data)
        except InvalidImportPayload as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        if request.query_params.get("background", "").lower() in _TRUTHY:
            result = tasks.import_products.delay(data)
            return Response(
                {"detail": "Import queued.", "task_id": result.id, "records": len(records)},
                status=status.HTTP_202_ACCEPTED,
            )

        try:
            summary = self._importer.import_records(records)
        except ImportFailed as exc:
            return Response(
                {
                    "detail": f"Internal server error: {exc.__cause__ or exc}",
                    "record_index": exc.record_index,
                    "record_name": exc.record_name,
                },
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response(
            {"detail": "Products imported successfully.", **summary.model_dump()}
        )

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"], url_path="clear-database")
    def clear_database(self, request: Request) -> Response:
        """POST /api/v1/products/clear-database/"""
        self._service.clear_catalog()
        return Response({"detail": "Database cleared successfully."})
