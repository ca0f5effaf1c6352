"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``modules.core.exceptions.exception_handler``,
which renders them in the standard error envelope.
"""

from __future__ import annotations

from typing import Optional

from django.core.files.uploadedfile import UploadedFile
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.identity import current_user
from modules.core.storage import DjangoBlobStore
from modules.products.dtos import CreateProductDTO, ImageUploadDTO, UpdateProductDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    CreateProductSerializer,
    ProductSerializer,
    UpdateProductSerializer,
)
from modules.products.services import ProductService

LISTING_ACTIONS = {"list", "mine", "by_category"}


def _image_from_upload(upload: Optional[UploadedFile]) -> Optional[ImageUploadDTO]:
    if upload is None:
        return None
    return ImageUploadDTO(
        filename=upload.name or "",
        content=upload.read(),
        content_type=getattr(upload, "content_type", "") or "",
    )


class ProductViewSet(GenericViewSet):
    """ViewSet for Product operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` and the
    default blob store (DIP).  Does **not** extend ``ModelViewSet``: all
    ORM access goes through the service/repository layer.
    """

    queryset = Product.objects.none()
    serializer_class = ProductSerializer
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(
            repository=ProductDjangoRepository(),
            blob_store=DjangoBlobStore(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "product_listing" if self.action in LISTING_ACTIONS else None
        return super().get_throttles()

    def get_queryset(self):
        return self._service.list_active()

    def _paginated(self, request: Request, queryset) -> Response:
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ProductSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(ProductSerializer(queryset, many=True).data)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/?category=&owner=

        Only active products are listed.
        """
        queryset = self.filter_queryset(self.get_queryset())
        return self._paginated(request, queryset)

    @action(detail=False, methods=["get"])
    def mine(self, request: Request) -> Response:
        """GET /api/v1/products/mine/"""
        queryset = self._service.list_by_owner(current_user(request))
        return self._paginated(request, queryset)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"category/(?P<category>[^/]+)",
    )
    def by_category(self, request: Request, category: str) -> Response:
        """GET /api/v1/products/category/{category}/"""
        queryset = self._service.list_by_category(category)
        return self._paginated(request, queryset)

    def retrieve(self, request: Request, pk: str) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._service.get_product(pk)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/ (multipart)"""
        owner_id = current_user(request)
        serializer = CreateProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dto = CreateProductDTO(
            title=data["title"],
            description=data.get("description", ""),
            category=data["category"],
            condition=data["condition"],
        )
        product = self._service.create_product(
            dto,
            owner_id=owner_id,
            image=_image_from_upload(data.get("image")),
        )
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/

        Only descriptive fields and the image can change.
        """
        owner_id = current_user(request)
        serializer = UpdateProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        dto = UpdateProductDTO(
            title=data.get("title"),
            description=data.get("description"),
            category=data.get("category"),
            condition=data.get("condition"),
        )
        product = self._service.update_product(
            pk,
            owner_id=owner_id,
            dto=dto,
            image=_image_from_upload(data.get("image")),
        )
        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str) -> Response:
        """DELETE /api/v1/products/{pk}/ (soft delete)"""
        self._service.soft_delete(pk, owner_id=current_user(request))
        return Response(status=status.HTTP_204_NO_CONTENT)
