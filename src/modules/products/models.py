"""Product model and its availability status.

Business rules implemented:
- A product is created ``active`` by its owner; ``owner`` never changes.
- A product leaves the listings by becoming ``inactive``: soft delete by
  its owner, or because an exchange referencing it completed.
- Products are never physically deleted.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.utils import timezone

from modules.core.models import BaseModel
from modules.products.constants import ProductStatus


class Product(BaseModel):
    """Product offered for exchange.

    ``image`` holds the URI returned by the blob store.  Status is the only
    field the exchange engine and the reconciliation sweep ever touch, and
    only through ``deactivate()``.
    """

    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=100)
    condition = models.CharField(max_length=50)
    image = models.CharField(max_length=500)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="products",
    )
    status = models.CharField(
        max_length=20,
        choices=ProductStatus.choices,
        default=ProductStatus.ACTIVE,
    )
    release_date = models.DateField(default=timezone.localdate)

    class Meta:
        db_table = "products"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="products_status_idx"),
            models.Index(fields=["category", "status"], name="products_category_idx"),
            models.Index(fields=["owner", "status"], name="products_owner_idx"),
        ]

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    def is_owned_by(self, user_id: int) -> bool:
        return self.owner_id == user_id

    def deactivate(self) -> bool:
        """Mark the product inactive.

        Returns ``True`` if the status changed, ``False`` if it was already
        inactive (callers skip the write in that case).
        """
        if self.status == ProductStatus.INACTIVE:
            return False
        self.status = ProductStatus.INACTIVE
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.category:
            self.category = self.category.strip()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.title} ({self.status})"
