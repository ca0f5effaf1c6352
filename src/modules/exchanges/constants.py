"""Exchange domain constants.

Defines status choices and valid status transitions for the exchange
state machine.  ``ACCEPTED`` is kept for stored rows but no transition
leads into or out of it.
"""

from django.db import models


class ExchangeStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACCEPTED = "accepted", "Accepted"
    COMPLETED = "completed", "Completed"
    REJECTED = "rejected", "Rejected"


VALID_TRANSITIONS: dict[str, set[str]] = {
    ExchangeStatus.PENDING: {ExchangeStatus.COMPLETED, ExchangeStatus.REJECTED},
    ExchangeStatus.ACCEPTED: set(),
    ExchangeStatus.COMPLETED: set(),
    ExchangeStatus.REJECTED: set(),
}

TERMINAL_STATES: set[str] = {ExchangeStatus.COMPLETED, ExchangeStatus.REJECTED}

EVENT_TOPIC = "exchanges"
