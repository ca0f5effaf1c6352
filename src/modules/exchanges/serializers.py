"""Exchange DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.exchanges.models import Exchange

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class ProposeExchangeSerializer(serializers.Serializer):
    """Validates the exchange proposal payload."""

    product_from = serializers.UUIDField()
    product_to = serializers.UUIDField()


class IncomingExchangesQuerySerializer(serializers.Serializer):
    """Validates ``?product_to=`` on the exchange listing."""

    product_to = serializers.UUIDField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class ExchangeSerializer(serializers.ModelSerializer):
    """Read serializer for the Exchange resource."""

    product_from_title = serializers.CharField(source="product_from.title", read_only=True)
    product_to_title = serializers.CharField(source="product_to.title", read_only=True)

    class Meta:
        model = Exchange
        fields = [
            "id",
            "product_from",
            "product_from_title",
            "product_to",
            "product_to_title",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
