"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups the marketplace needs:
active listings by category / owner and locked reads for the exchange
engine.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository, Queryable

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list_active(
        self,
        category: Optional[str] = None,
        owner_id: Optional[int] = None,
    ) -> Queryable[Product]:
        """Active products only, optionally filtered by exact category / owner."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Returns ``None`` if the product does not exist.
        """

    @abstractmethod
    def lock_many(self, ids: Iterable[str]) -> List[Product]:
        """Lock several products in ascending id order (deadlock-safe)."""

    @abstractmethod
    def update_status(self, entity: Product) -> Product:
        """Persist only the ``status`` column of ``entity``."""
