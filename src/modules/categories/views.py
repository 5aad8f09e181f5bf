"""Category API views.

Exposes the ``CategoryService`` via HTTP.  Categories are never edited
directly: they are created on demand by name and listed.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.categories.exceptions import CategoryNotFound, InvalidCategory
from modules.categories.models import Category
from modules.categories.repositories.django_repository import CategoryDjangoRepository
from modules.categories.serializers import CategoryInputSerializer, CategorySerializer
from modules.categories.services import CategoryService


class CategoryViewSet(ListModelMixin, GenericViewSet):
    queryset = Category.objects.all()
    serializer_class = CategorySerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(repository=CategoryDjangoRepository())

    def get_queryset(self):
        return self._service.list_categories()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/categories/{pk}/"""
        try:
            category = self._service.get_category(pk)
        except CategoryNotFound:
            return Response(
                {"detail": "Category not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(CategorySerializer(category).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/categories/

        Resolve-or-create: 201 when the category is new, 200 when a
        category with that name already existed.
        """
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            category, created = self._service.get_or_create(
                serializer.validated_data["name"]
            )
        except InvalidCategory as exc:
            return Response(
                {"detail": str(exc)},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(
            CategorySerializer(category).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
