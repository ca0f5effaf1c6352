"""Exchange repository interface.

Extends ``IRepository[Exchange]`` with the locking read, the
compare-and-set status update and the scans needed by the exchange
engine and the reconciliation sweep.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository, Queryable

if TYPE_CHECKING:
    from modules.exchanges.models import Exchange


class IExchangeRepository(IRepository["Exchange"]):
    """Repository contract for the Exchange aggregate root."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Exchange]:
        """Retrieve an exchange with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def transition_status(
        self,
        entity: Exchange,
        from_status: str,
        to_status: str,
    ) -> bool:
        """Move ``entity`` to ``to_status`` only if it is still ``from_status``.

        Returns ``False`` (and leaves ``entity`` untouched) when another
        writer changed the status first.
        """

    @abstractmethod
    def record_events(self, entity: Exchange) -> None:
        """Write the entity's pending domain events to the outbox."""

    @abstractmethod
    def has_pending_from(self, product_from_id: UUID) -> bool:
        """Whether ``product_from_id`` is already offered in a pending exchange."""

    @abstractmethod
    def find_by_product_to(self, product_to_id: UUID) -> Queryable[Exchange]:
        """Every exchange, of any status, that targets ``product_to_id``."""

    @abstractmethod
    def list_unreconciled(self) -> Queryable[Exchange]:
        """Completed exchanges that still reference at least one active product."""

    @abstractmethod
    def list_pending_involving(
        self,
        product_ids: list[UUID],
        exclude_id: UUID,
    ) -> Queryable[Exchange]:
        """Pending exchanges offering or requesting any of ``product_ids``."""
