"""Exchange service layer (Use Cases).

Orchestrates proposal, selection and rejection of exchanges.  All write
operations are atomic: the service defines the unit-of-work boundary.

Business rules enforced:
- Only the owner of ``product_from`` may propose; the two products must
  belong to different users and both be active.
- At most one pending proposal per ``product_from``.
- Only the owner of ``product_to`` may select or reject a proposal.
- Selecting requires both products to still be active.  It completes the
  exchange, deactivates both products and rejects every other pending
  proposal involving them, all in the same transaction (direct transition
  path).  The reconciliation sweep repairs anything this path misses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog
from django.db import IntegrityError, transaction

from modules.exchanges.constants import ExchangeStatus
from modules.exchanges.events import (
    ExchangeCompleted,
    ExchangeProposed,
    ExchangeRejected,
)
from modules.exchanges.exceptions import (
    DuplicatePendingExchange,
    ExchangeNotFound,
    InvalidExchangeStatus,
    NotOwnerOfProductFrom,
    NotOwnerOfProductTo,
    ProductUnavailable,
    SameOwnerExchange,
)
from modules.exchanges.models import Exchange
from modules.products.exceptions import ProductNotFound
from modules.products.services import ProductService

if TYPE_CHECKING:
    from uuid import UUID

    from modules.core.identity import UserId
    from modules.core.repositories.interfaces import Queryable
    from modules.exchanges.dtos import ProposeExchangeDTO
    from modules.exchanges.events import ExchangeEvent
    from modules.exchanges.repositories.interfaces import IExchangeRepository
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ExchangeService:
    """Application service for Exchange use-cases.

    Receives repositories via constructor injection (DIP).  Product status
    changes are delegated to ``ProductService.deactivate``.
    """

    def __init__(
        self,
        exchange_repository: IExchangeRepository,
        product_repository: IProductRepository,
        product_service: Optional[ProductService] = None,
    ) -> None:
        self._exchange_repo = exchange_repository
        self._product_repo = product_repository
        self._product_service = product_service or ProductService(product_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def propose_exchange(self, proposer_id: UserId, dto: ProposeExchangeDTO) -> Exchange:
        """Offer ``dto.product_from`` in return for ``dto.product_to``.

        Both product rows are locked in ascending id order before any
        check runs.

        Raises:
            ProductNotFound: either product does not exist.
            NotOwnerOfProductFrom: the proposer does not own ``product_from``.
            SameOwnerExchange: both products have the same owner.
            ProductUnavailable: either product is inactive.
            DuplicatePendingExchange: ``product_from`` already has a pending
                proposal.
        """
        log = logger.bind(
            proposer_id=proposer_id,
            product_from_id=str(dto.product_from),
            product_to_id=str(dto.product_to),
        )

        locked = {
            product.id: product
            for product in self._product_repo.lock_many([dto.product_from, dto.product_to])
        }
        product_from = locked.get(dto.product_from)
        product_to = locked.get(dto.product_to)
        if product_from is None:
            raise ProductNotFound(f"Product {dto.product_from} not found.")
        if product_to is None:
            raise ProductNotFound(f"Product {dto.product_to} not found.")

        if not product_from.is_owned_by(proposer_id):
            log.warning("exchange.not_owner_of_product_from")
            raise NotOwnerOfProductFrom("You can only offer products you own.")
        if product_from.owner_id == product_to.owner_id:
            raise SameOwnerExchange("Both products belong to the same user.")
        for product in (product_from, product_to):
            if not product.is_active:
                raise ProductUnavailable(f"Product {product.id} is no longer available.")
        if self._exchange_repo.has_pending_from(product_from.id):
            raise DuplicatePendingExchange(
                f"Product {product_from.id} already has a pending exchange proposal."
            )

        exchange = Exchange(
            product_from=product_from,
            product_to=product_to,
            status=ExchangeStatus.PENDING,
        )
        exchange.add_domain_event(
            ExchangeProposed(
                aggregate_id=exchange.id,
                actor_id=proposer_id,
                product_from_id=product_from.id,
                product_to_id=product_to.id,
            )
        )
        try:
            with transaction.atomic():
                self._exchange_repo.save(exchange)
        except IntegrityError as exc:
            log.warning("exchange.pending_conflict")
            raise DuplicatePendingExchange(
                f"Product {product_from.id} already has a pending exchange proposal."
            ) from exc

        log.info("exchange.proposed", exchange_id=str(exchange.id))
        return exchange

    @transaction.atomic
    def select_exchange(self, actor_id: UserId, exchange_id: str) -> Exchange:
        """Complete a proposal and withdraw both products from the listings.

        Both products are locked and must still be active.  Every other
        pending proposal that involves either product is rejected in the
        same transaction.

        Raises:
            ExchangeNotFound: the exchange does not exist.
            NotOwnerOfProductTo: the actor does not own ``product_to``.
            InvalidExchangeStatus: the exchange is not pending, including
                when a concurrent caller completed or rejected it first.
            ProductUnavailable: either product is no longer active.
        """
        exchange = self._get_for_counterparty(actor_id, exchange_id)
        self._check_transition(exchange, ExchangeStatus.COMPLETED)

        product_ids = [exchange.product_from_id, exchange.product_to_id]
        products = self._product_repo.lock_many(product_ids)
        if len(products) < 2 or not all(product.is_active for product in products):
            logger.warning(
                "exchange.product_unavailable",
                exchange_id=str(exchange.id),
                actor_id=actor_id,
            )
            raise ProductUnavailable(
                "One of the products in this exchange is no longer available."
            )

        self._transition(exchange, ExchangeStatus.COMPLETED)

        deactivated = 0
        for product in products:
            if self._product_service.deactivate(product):
                deactivated += 1

        self._raise_event(exchange, ExchangeCompleted, actor_id)
        withdrawn = self._reject_competing(exchange, product_ids)
        logger.info(
            "exchange.completed",
            exchange_id=str(exchange.id),
            actor_id=actor_id,
            products_deactivated=deactivated,
            proposals_withdrawn=withdrawn,
        )
        return self._exchange_repo.get_by_id(str(exchange.id)) or exchange

    @transaction.atomic
    def reject_exchange(self, actor_id: UserId, exchange_id: str) -> Exchange:
        """Decline a proposal.  Products are left as they are.

        Raises:
            ExchangeNotFound: the exchange does not exist.
            NotOwnerOfProductTo: the actor does not own ``product_to``.
            InvalidExchangeStatus: the exchange cannot be rejected.
        """
        exchange = self._get_for_counterparty(actor_id, exchange_id)
        self._transition(exchange, ExchangeStatus.REJECTED)
        self._raise_event(exchange, ExchangeRejected, actor_id)
        logger.info("exchange.rejected", exchange_id=str(exchange.id), actor_id=actor_id)
        return self._exchange_repo.get_by_id(str(exchange.id)) or exchange

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_product_to(self, product_to_id: UUID) -> Queryable[Exchange]:
        """Every exchange, of any status, targeting ``product_to_id``."""
        return self._exchange_repo.find_by_product_to(product_to_id)

    def get_exchange(self, exchange_id: str) -> Exchange:
        """Retrieve a single exchange by ID.

        Raises:
            ExchangeNotFound: if the exchange does not exist.
        """
        exchange = self._exchange_repo.get_by_id(exchange_id)
        if not exchange:
            raise ExchangeNotFound(f"Exchange {exchange_id} not found.")
        return exchange

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_for_counterparty(self, actor_id: UserId, exchange_id: str) -> Exchange:
        exchange = self._exchange_repo.get_for_update(exchange_id)
        if not exchange:
            raise ExchangeNotFound(f"Exchange {exchange_id} not found.")
        if not exchange.product_to.is_owned_by(actor_id):
            logger.warning(
                "exchange.not_owner_of_product_to",
                exchange_id=str(exchange_id),
                actor_id=actor_id,
            )
            raise NotOwnerOfProductTo(
                "Only the owner of the requested product can answer this proposal."
            )
        return exchange

    def _check_transition(self, exchange: Exchange, new_status: str) -> None:
        if not exchange.can_transition_to(new_status):
            logger.warning(
                "exchange.invalid_transition",
                exchange_id=str(exchange.id),
                current_status=exchange.status,
                new_status=new_status,
            )
            raise InvalidExchangeStatus(
                f"Cannot move exchange from {exchange.status} to {new_status}."
            )

    def _transition(self, exchange: Exchange, new_status: str) -> None:
        current = exchange.status
        self._check_transition(exchange, new_status)
        if not self._exchange_repo.transition_status(exchange, current, new_status):
            raise InvalidExchangeStatus(
                f"Exchange {exchange.id} was modified concurrently; "
                f"it is no longer {current}."
            )

    def _reject_competing(self, exchange: Exchange, product_ids: list[UUID]) -> int:
        """Reject the other pending proposals that involve the traded products."""
        withdrawn = 0
        for other in self._exchange_repo.list_pending_involving(
            product_ids, exclude_id=exchange.id
        ):
            if self._exchange_repo.transition_status(
                other, ExchangeStatus.PENDING, ExchangeStatus.REJECTED
            ):
                self._raise_event(other, ExchangeRejected, None)
                withdrawn += 1
        return withdrawn

    def _raise_event(
        self,
        exchange: Exchange,
        event_class: type[ExchangeEvent],
        actor_id: Optional[int],
    ) -> None:
        exchange.add_domain_event(
            event_class(
                aggregate_id=exchange.id,
                actor_id=actor_id,
                product_from_id=exchange.product_from_id,
                product_to_id=exchange.product_to_id,
            )
        )
        self._exchange_repo.record_events(exchange)
