"""Domain events for the Exchanges bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ExchangeEvent(DomainEvent):
    """Common payload: the two products the exchange links."""

    product_from_id: UUID
    product_to_id: UUID


@dataclass(frozen=True, kw_only=True)
class ExchangeProposed(ExchangeEvent):
    """Raised when a user proposes an exchange."""


@dataclass(frozen=True, kw_only=True)
class ExchangeCompleted(ExchangeEvent):
    """Raised when the owner of the requested product selects a proposal."""


@dataclass(frozen=True, kw_only=True)
class ExchangeRejected(ExchangeEvent):
    """Raised when the owner of the requested product rejects a proposal."""
