"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising — the Service Layer decides how to report a missing
entity.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.constants import ProductStatus
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key, whatever its status.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.select_related("owner").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"status": "active"}
            {"category": "books"}
        """
        queryset = Product.objects.select_related("owner")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def list_active(
        self,
        category: Optional[str] = None,
        owner_id: Optional[int] = None,
    ) -> models.QuerySet[Product]:
        filters: Dict[str, Any] = {"status": ProductStatus.ACTIVE}
        if category is not None:
            filters["category"] = category
        if owner_id is not None:
            filters["owner_id"] = owner_id
        return self.list(filters)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            status=entity.status,
        )
        return entity

    @transaction.atomic
    def update_status(self, entity: Product) -> Product:
        entity.save(update_fields=["status"])
        logger.info(
            "product.status_saved",
            product_id=str(entity.id),
            status=entity.status,
        )
        return entity

    def get_for_update(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def lock_many(self, ids: Iterable[str]) -> List[Product]:
        """Lock rows sorted by primary key so concurrent callers never deadlock."""
        try:
            return list(
                Product.objects.select_for_update().filter(id__in=list(ids)).order_by("id")
            )
        except (ValueError, ValidationError):
            return []
