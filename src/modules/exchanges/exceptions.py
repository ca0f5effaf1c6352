"""Exchange domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
belongs to a category of ``modules.core.exceptions`` which fixes how the
API layer reports it.
"""

from __future__ import annotations

from modules.core.exceptions import (
    ConflictingState,
    InvalidInput,
    NotFound,
    PermissionDenied,
)


class ExchangeNotFound(NotFound):
    """The requested exchange does not exist."""


class NotOwnerOfProductFrom(PermissionDenied):
    """Only the owner of the offered product may propose an exchange with it."""


class NotOwnerOfProductTo(PermissionDenied):
    """Only the owner of the requested product may select or reject a proposal."""


class SameOwnerExchange(InvalidInput):
    """Both products belong to the same user."""


class ProductUnavailable(ConflictingState):
    """One of the products is no longer active."""


class DuplicatePendingExchange(ConflictingState):
    """The offered product already has a pending proposal."""


class InvalidExchangeStatus(ConflictingState):
    """The exchange is not in a status that allows the requested transition."""
