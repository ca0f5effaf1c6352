"""Django ORM implementation of the Exchange repository.

Satisfies ``IExchangeRepository`` using Django's QuerySet API.
Look-ups return ``None`` for missing or malformed IDs; the Service Layer
decides how to report them.

Status changes go through ``transition_status``, a conditional
``UPDATE ... WHERE status = <expected>`` that only one concurrent writer
can win, on every database backend.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.utils import timezone

from modules.core.outbox import record_domain_events
from modules.exchanges.constants import EVENT_TOPIC, ExchangeStatus
from modules.exchanges.models import Exchange
from modules.exchanges.repositories.interfaces import IExchangeRepository
from modules.products.constants import ProductStatus

logger = structlog.get_logger(__name__)


class ExchangeDjangoRepository(IExchangeRepository):
    """Concrete Exchange repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Exchange]:
        """Retrieve an exchange with both products eager-loaded."""
        try:
            return (
                Exchange.objects.select_related("product_from", "product_to")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet[Exchange]:
        """List exchanges with optional Django ORM look-ups."""
        queryset = Exchange.objects.select_related("product_from", "product_to")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    def get_for_update(self, id: str) -> Optional[Exchange]:
        """Lock the exchange row only; products are loaded lazily."""
        try:
            return Exchange.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def has_pending_from(self, product_from_id: UUID) -> bool:
        return Exchange.objects.filter(
            product_from_id=product_from_id,
            status=ExchangeStatus.PENDING,
        ).exists()

    def find_by_product_to(self, product_to_id: UUID) -> models.QuerySet[Exchange]:
        return self.list({"product_to_id": product_to_id})

    def list_pending_involving(
        self,
        product_ids: list[UUID],
        exclude_id: UUID,
    ) -> models.QuerySet[Exchange]:
        return (
            self.list({"status": ExchangeStatus.PENDING})
            .filter(
                models.Q(product_from_id__in=product_ids)
                | models.Q(product_to_id__in=product_ids)
            )
            .exclude(id=exclude_id)
            .order_by("created_at")
        )

    def list_unreconciled(self) -> models.QuerySet[Exchange]:
        return (
            self.list({"status": ExchangeStatus.COMPLETED})
            .filter(
                models.Q(product_from__status=ProductStatus.ACTIVE)
                | models.Q(product_to__status=ProductStatus.ACTIVE)
            )
            .order_by("created_at")
        )

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Exchange) -> Exchange:
        """Persist (create or update) an exchange and its pending events."""
        entity.save()
        rows = record_domain_events(entity, topic=EVENT_TOPIC)
        logger.info(
            "exchange.saved",
            exchange_id=str(entity.id),
            status=entity.status,
            event_count=len(rows),
        )
        return entity

    def transition_status(
        self,
        entity: Exchange,
        from_status: str,
        to_status: str,
    ) -> bool:
        updated = Exchange.objects.filter(id=entity.id, status=from_status).update(
            status=to_status,
            updated_at=timezone.now(),
        )
        log = logger.bind(
            exchange_id=str(entity.id),
            from_status=from_status,
            to_status=to_status,
        )
        if not updated:
            log.warning("exchange.transition_lost")
            return False
        entity.status = to_status
        log.info("exchange.status_saved")
        return True

    def record_events(self, entity: Exchange) -> None:
        record_domain_events(entity, topic=EVENT_TOPIC)
