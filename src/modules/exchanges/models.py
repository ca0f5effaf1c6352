"""Exchange model.

Business rules implemented:
- An exchange offers ``product_from`` in return for ``product_to``; the two
  products are distinct (database check constraint).
- At most one ``pending`` exchange per ``product_from`` (conditional unique
  constraint, also checked by the service).
- Status transitions follow ``VALID_TRANSITIONS`` (enforced at service
  layer); ``completed`` and ``rejected`` are terminal.
- Product FKs use PROTECT: exchanges keep their history.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.exchanges.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    ExchangeStatus,
)
from shared.domain.events import DomainEventMixin


class Exchange(DomainEventMixin, BaseModel):
    """Exchange aggregate root."""

    product_from = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="outgoing_exchanges",
    )
    product_to = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="incoming_exchanges",
    )
    status = models.CharField(
        max_length=20,
        choices=ExchangeStatus.choices,
        default=ExchangeStatus.PENDING,
    )

    class Meta:
        db_table = "exchanges"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="exchanges_status_idx"),
            models.Index(fields=["product_to", "status"], name="exchanges_to_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(product_from=models.F("product_to")),
                name="exchanges_distinct_products",
            ),
            models.UniqueConstraint(
                fields=["product_from"],
                condition=models.Q(status=ExchangeStatus.PENDING),
                name="exchanges_one_pending_per_product_from",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the exchange is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.product_from_id} -> {self.product_to_id} ({self.status})"
