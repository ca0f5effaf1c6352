"""Outbox recording and after-commit dispatch of domain events."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.core.models import OutboxEvent
from shared.infrastructure.bus import event_bus

if TYPE_CHECKING:
    from shared.domain.events import DomainEvent, DomainEventMixin

logger = structlog.get_logger(__name__)


def record_domain_events(entity: DomainEventMixin, topic: str) -> List[OutboxEvent]:
    """Persist the entity's pending events and clear them.

    Must run inside the transaction that changed the entity.  Each event
    is published on the in-process bus only once that transaction commits.
    """
    rows = []
    for event in entity.domain_events:
        row = OutboxEvent.from_domain_event(event, topic=topic)
        row.save()
        rows.append(row)
        transaction.on_commit(partial(dispatch_event, row, event))
    entity.clear_domain_events()
    return rows


def dispatch_event(row: OutboxEvent, event: DomainEvent) -> None:
    """Publish ``event`` on the bus and record the outcome on its outbox row."""
    log = logger.bind(event_type=row.event_type, aggregate_id=row.aggregate_id)
    try:
        event_bus.publish(event)
    except Exception as exc:
        log.exception("outbox.dispatch_failed")
        row.mark_as_failed(str(exc))
        return
    row.mark_as_published()
    log.info("outbox.dispatched")
