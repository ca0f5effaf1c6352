"""Event handlers for Exchanges domain events.

The outbox table is the audit trail of every exchange state change.  The
handlers run only after the writing transaction commits, so each one
emits the committed audit line for its event, keyed by ``event_id`` so it
can be joined back to its outbox row.  Service-level log lines are
written before commit and may describe work that was rolled back.
"""

from __future__ import annotations

import structlog

from modules.exchanges.events import (
    ExchangeCompleted,
    ExchangeEvent,
    ExchangeProposed,
    ExchangeRejected,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


def _audit_fields(event: ExchangeEvent) -> dict:
    return {
        "event_id": str(event.event_id),
        "event_name": event.event_name,
        "occurred_on": event.occurred_on.isoformat(),
        "exchange_id": str(event.aggregate_id),
        "product_from_id": str(event.product_from_id),
        "product_to_id": str(event.product_to_id),
        "actor_id": event.actor_id,
        "initiated_by": "user" if event.actor_id is not None else "system",
    }


class ExchangeProposedHandler(IEventHandler[ExchangeProposed]):
    def handle(self, event: ExchangeProposed) -> None:
        logger.info("exchange.audit.proposed", **_audit_fields(event))


class ExchangeCompletedHandler(IEventHandler[ExchangeCompleted]):
    def handle(self, event: ExchangeCompleted) -> None:
        logger.info("exchange.audit.completed", **_audit_fields(event))


class ExchangeRejectedHandler(IEventHandler[ExchangeRejected]):
    def handle(self, event: ExchangeRejected) -> None:
        logger.info("exchange.audit.rejected", **_audit_fields(event))


exchange_proposed_handler = ExchangeProposedHandler()
exchange_completed_handler = ExchangeCompletedHandler()
exchange_rejected_handler = ExchangeRejectedHandler()
