"""Product domain constants."""

from django.db import models


class ProductStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


ALLOWED_IMAGE_EXTENSIONS: frozenset[str] = frozenset({"jpg", "jpeg", "png"})

# Storage prefix for uploaded product images
IMAGE_UPLOAD_PREFIX = "products"
