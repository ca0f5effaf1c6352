"""Product service layer (Use Cases).

Owns the Product status field and its legal transitions, delegating
persistence to the injected ``IProductRepository`` and image bytes to the
injected ``IBlobStore``.

Business rules enforced here:
- Images must be present and have a jpg / jpeg / png extension.
- The image is stored before the product row; a failed row insert removes
  the stored image again.
- Only the owner may update or soft-delete a product.
- Listings only ever show active products; point look-ups do not filter.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Optional

import structlog
from django.db import transaction
from django.utils import timezone
from django.utils.text import get_valid_filename

from modules.core.storage import BlobStorageError
from modules.products.constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    IMAGE_UPLOAD_PREFIX,
    ProductStatus,
)
from modules.products.exceptions import (
    ImageStorageFailure,
    InvalidImageFormat,
    MissingImage,
    NotProductOwner,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.core.identity import UserId
    from modules.core.storage import IBlobStore, StoredBlob
    from modules.products.dtos import (
        CreateProductDTO,
        ImageUploadDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` and an ``IBlobStore`` via
    constructor injection (DIP).  Every mutating operation takes the
    acting user explicitly.
    """

    def __init__(
        self,
        repository: IProductRepository,
        blob_store: Optional[IBlobStore] = None,
    ) -> None:
        self._repo = repository
        self._blobs = blob_store

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(
        self,
        dto: CreateProductDTO,
        owner_id: UserId,
        image: Optional[ImageUploadDTO],
    ) -> Product:
        """Create an active product owned by ``owner_id``.

        Raises:
            MissingImage: no image or an empty one.
            InvalidImageFormat: extension outside jpg / jpeg / png.
            ImageStorageFailure: the image could not be stored.
        """
        log = logger.bind(owner_id=owner_id, category=dto.category)
        stored = self._store_image(image)

        try:
            with transaction.atomic():
                product = Product(
                    title=dto.title,
                    description=dto.description,
                    category=dto.category,
                    condition=dto.condition,
                    image=stored.uri,
                    owner_id=owner_id,
                    status=ProductStatus.ACTIVE,
                    release_date=timezone.localdate(),
                )
                product = self._repo.save(product)
        except Exception:
            log.warning("product.create_failed_image_discarded", image=stored.name)
            self._blobs.delete(stored.name)
            raise

        log.info("product.created", product_id=str(product.id))
        return product

    def update_product(
        self,
        id: str,
        owner_id: UserId,
        dto: UpdateProductDTO,
        image: Optional[ImageUploadDTO] = None,
    ) -> Product:
        """Update descriptive fields (and optionally the image) of a product.

        Status and owner are never changed here.

        Raises:
            ProductNotFound: if the product does not exist.
            NotProductOwner: if ``owner_id`` is not the product's owner.
        """
        log = logger.bind(product_id=str(id), actor_id=owner_id)
        stored = None

        with transaction.atomic():
            product = self._get_owned_for_update(id, owner_id)

            for field in ("title", "description", "category", "condition"):
                value = getattr(dto, field)
                if value is not None:
                    setattr(product, field, value)

            if image is not None:
                stored = self._store_image(image)
                product.image = stored.uri

            try:
                product = self._repo.save(product)
            except Exception:
                if stored is not None:
                    self._blobs.delete(stored.name)
                raise

        log.info("product.updated", image_replaced=stored is not None)
        return product

    @transaction.atomic
    def soft_delete(self, id: str, owner_id: UserId) -> None:
        """Withdraw a product from the listings by marking it inactive.

        Idempotent: an already inactive product is left untouched.

        Raises:
            ProductNotFound: if the product does not exist.
            NotProductOwner: if ``owner_id`` is not the product's owner.
        """
        product = self._get_owned_for_update(id, owner_id)
        log = logger.bind(product_id=str(id), actor_id=owner_id)

        if not self.deactivate(product):
            log.info("product.soft_delete_noop")
            return
        log.info("product.soft_deleted")

    def deactivate(self, product: Product) -> bool:
        """Mark ``product`` inactive, writing only if it was active.

        Shared by soft delete, exchange completion and the reconciliation
        sweep.  Returns whether a write happened.
        """
        if not product.deactivate():
            return False
        self._repo.update_status(product)
        logger.info("product.deactivated", product_id=str(product.id))
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_active(
        self,
        category: Optional[str] = None,
        owner_id: Optional[int] = None,
    ) -> QuerySet[Product]:
        """Active products, optionally filtered by exact category and owner.

        Order is whatever the persistence layer returns.
        """
        return self._repo.list_active(category=category, owner_id=owner_id)

    def list_by_category(self, category: str) -> QuerySet[Product]:
        return self.list_active(category=category)

    def list_by_owner(self, owner_id: UserId) -> QuerySet[Product]:
        return self.list_active(owner_id=owner_id)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID, active or not.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_owned_for_update(self, id: str, owner_id: UserId) -> Product:
        product = self._repo.get_for_update(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        if not product.is_owned_by(owner_id):
            logger.warning(
                "product.not_owner", product_id=str(id), actor_id=owner_id
            )
            raise NotProductOwner("You do not have permission to modify this product.")
        return product

    def _store_image(self, image: Optional[ImageUploadDTO]) -> StoredBlob:
        if image is None or image.is_empty:
            raise MissingImage("A non-empty image file is required.")
        if image.extension not in ALLOWED_IMAGE_EXTENSIONS:
            raise InvalidImageFormat(
                "Image extension not allowed. Upload a jpg, jpeg or png image."
            )
        if self._blobs is None:
            raise ImageStorageFailure("No image storage is configured.")

        name = f"{IMAGE_UPLOAD_PREFIX}/{uuid.uuid4().hex}_{get_valid_filename(image.filename)}"
        try:
            return self._blobs.write(name, image.content)
        except BlobStorageError as exc:
            raise ImageStorageFailure(f"Could not store product image: {exc}") from exc
