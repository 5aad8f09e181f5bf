"""Category DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.categories.constants import NAME_MAX_LENGTH
from modules.categories.models import Category


class CategorySerializer(serializers.ModelSerializer):
    """Read serializer for the Category resource."""

    class Meta:
        model = Category
        fields = ["id", "name", "description", "created_at", "updated_at"]
        read_only_fields = fields


class CategoryInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=NAME_MAX_LENGTH)
