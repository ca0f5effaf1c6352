"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the persistence gateway contract every
domain-specific repository extends.  Service-layer code depends on these
abstractions, never on the Django ORM directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterator, Optional, Protocol, TypeVar

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Queryable(Protocol[T_co]):
    """Lazily evaluated, further-filterable sequence (a QuerySet in practice)."""

    def filter(self, *args: Any, **kwargs: Any) -> Queryable[T_co]: ...

    def __iter__(self) -> Iterator[T_co]: ...


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` is the entity managed by the repository
    (``Product``, ``Exchange``).  Entities are never physically deleted
    through a repository.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key, ``None`` when absent."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Queryable[T]:
        """List entities matching simple field look-ups."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""
