"""Celery tasks for the Exchanges module."""

from __future__ import annotations

from typing import Any, Dict

import structlog
from celery import shared_task

from modules.exchanges.reconciliation import ExchangeReconciler
from modules.exchanges.repositories.django_repository import ExchangeDjangoRepository
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.services import ProductService

logger = structlog.get_logger(__name__)


@shared_task(name="exchanges.reconcile_exchanged_products")
def reconcile_exchanged_products() -> Dict[str, Any]:
    """Scheduled by Celery beat every ``RECONCILIATION_INTERVAL_SECONDS``.

    Bad records are counted in the result, never raised; the next tick
    picks them up again.
    """
    reconciler = ExchangeReconciler(
        exchange_repository=ExchangeDjangoRepository(),
        product_service=ProductService(ProductDjangoRepository()),
    )
    result = reconciler.run()
    if result.failed:
        logger.warning("reconciliation.partial_failure", **result.as_dict())
    return result.as_dict()
