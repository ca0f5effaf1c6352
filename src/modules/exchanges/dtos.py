"""Exchange DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ProposeExchangeDTO(BaseModel):
    """Immutable DTO for exchange proposals.

    ``product_from`` is offered by the proposer in return for
    ``product_to``.
    """

    model_config = ConfigDict(frozen=True)

    product_from: UUID
    product_to: UUID
