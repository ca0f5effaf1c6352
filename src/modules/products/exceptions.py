"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
belongs to a category of ``modules.core.exceptions`` which fixes how the
API layer reports it.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidInput, NotFound, PermissionDenied
from modules.core.storage import BlobStorageError


class ProductNotFound(NotFound):
    """The requested product does not exist."""


class NotProductOwner(PermissionDenied):
    """Only the product's owner may change or delete it."""


class MissingImage(InvalidInput):
    """A product must be created with a non-empty image."""


class InvalidImageFormat(InvalidInput):
    """The image extension is not one of jpg, jpeg or png."""


class ImageStorageFailure(BlobStorageError):
    """The product image could not be written; no product was created."""
