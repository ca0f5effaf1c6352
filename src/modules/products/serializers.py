"""Product DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateProductSerializer(serializers.Serializer):
    """Validates the multipart product creation payload.

    The image is accepted as a plain file; its format is checked by the
    service so that every entry point applies the same rule.
    """

    title = serializers.CharField(max_length=255)
    description = serializers.CharField(required=False, default="", allow_blank=True)
    category = serializers.CharField(max_length=100)
    condition = serializers.CharField(max_length=50)
    image = serializers.FileField(required=False, allow_empty_file=True)


class UpdateProductSerializer(serializers.Serializer):
    """Validates product updates; every field is optional."""

    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(max_length=100, required=False)
    condition = serializers.CharField(max_length=50, required=False)
    image = serializers.FileField(required=False, allow_empty_file=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource."""

    owner_username = serializers.CharField(source="owner.username", read_only=True)

    class Meta:
        model = Product
        fields = [
            "id",
            "title",
            "description",
            "category",
            "condition",
            "image",
            "owner",
            "owner_username",
            "status",
            "release_date",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
