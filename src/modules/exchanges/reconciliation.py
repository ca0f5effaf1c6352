"""Periodic reconciliation of product status with completed exchanges.

Every product referenced by a completed exchange must end up inactive.
Selecting an exchange deactivates both products directly; this sweep
re-derives the same result from the exchange table and corrects any
product the direct path left active.  Running it any number of times,
or alongside the direct path, converges to the same state.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict

import structlog
from django.db import transaction

if TYPE_CHECKING:
    from modules.exchanges.models import Exchange
    from modules.exchanges.repositories.interfaces import IExchangeRepository
    from modules.products.services import ProductService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ReconciliationResult:
    """Counters for one sweep."""

    scanned: int = 0
    deactivated: int = 0
    failed: int = 0

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ExchangeReconciler:
    """Deactivates products still active behind a completed exchange."""

    def __init__(
        self,
        exchange_repository: IExchangeRepository,
        product_service: ProductService,
    ) -> None:
        self._exchange_repo = exchange_repository
        self._product_service = product_service

    def run(self) -> ReconciliationResult:
        """Sweep once.

        Each exchange is reconciled inside its own savepoint; a failure is
        logged and counted and the sweep moves on to the next exchange.
        """
        log = logger.bind(job="reconcile_exchanged_products")
        scanned = deactivated = failed = 0

        for exchange in list(self._exchange_repo.list_unreconciled()):
            scanned += 1
            try:
                with transaction.atomic():
                    deactivated += self._reconcile(exchange)
            except Exception:
                failed += 1
                log.exception("reconciliation.item_failed", exchange_id=str(exchange.id))

        result = ReconciliationResult(
            scanned=scanned,
            deactivated=deactivated,
            failed=failed,
        )
        if scanned:
            log.info("reconciliation.finished", **result.as_dict())
        else:
            log.debug("reconciliation.finished", **result.as_dict())
        return result

    def _reconcile(self, exchange: Exchange) -> int:
        count = 0
        for product in (exchange.product_from, exchange.product_to):
            if product is not None and self._product_service.deactivate(product):
                count += 1
        return count
