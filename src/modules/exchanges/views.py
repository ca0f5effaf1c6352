"""Exchange API views.

Exposes the ``ExchangeService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``modules.core.exceptions.exception_handler``,
which renders them in the standard error envelope.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.identity import current_user
from modules.exchanges.dtos import ProposeExchangeDTO
from modules.exchanges.models import Exchange
from modules.exchanges.repositories.django_repository import ExchangeDjangoRepository
from modules.exchanges.serializers import (
    ExchangeSerializer,
    IncomingExchangesQuerySerializer,
    ProposeExchangeSerializer,
)
from modules.exchanges.services import ExchangeService
from modules.products.repositories.django_repository import ProductDjangoRepository


class ExchangeViewSet(GenericViewSet):
    """ViewSet for Exchange operations.

    Uses ``ExchangeService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Exchange.objects.none()
    serializer_class = ExchangeSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ExchangeService(
            exchange_repository=ExchangeDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "exchange_proposal" if self.action == "create" else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/exchanges/"""
        proposer_id = current_user(request)
        serializer = ProposeExchangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = ProposeExchangeDTO(**serializer.validated_data)
        exchange = self._service.propose_exchange(proposer_id, dto)
        return Response(ExchangeSerializer(exchange).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/exchanges/?product_to={id}

        ``product_to`` is required; exchanges of every status are returned.
        """
        query = IncomingExchangesQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        queryset = self._service.find_by_product_to(query.validated_data["product_to"])
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = ExchangeSerializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(ExchangeSerializer(queryset, many=True).data)

    def retrieve(self, request: Request, pk: str) -> Response:
        """GET /api/v1/exchanges/{pk}/"""
        exchange = self._service.get_exchange(pk)
        return Response(ExchangeSerializer(exchange).data)

    # ------------------------------------------------------------------
    # Transitions (dedicated actions)
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"], url_path="select")
    def select_exchange(self, request: Request, pk: str) -> Response:
        """POST /api/v1/exchanges/{pk}/select/

        Completes the exchange and deactivates both products.
        """
        exchange = self._service.select_exchange(current_user(request), pk)
        return Response(ExchangeSerializer(exchange).data)

    @action(detail=True, methods=["post"], url_path="reject")
    def reject_exchange(self, request: Request, pk: str) -> Response:
        """POST /api/v1/exchanges/{pk}/reject/"""
        exchange = self._service.reject_exchange(current_user(request), pk)
        return Response(ExchangeSerializer(exchange).data)
