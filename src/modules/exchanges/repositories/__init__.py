"""Exchange repositories package."""

from modules.exchanges.repositories.django_repository import ExchangeDjangoRepository
from modules.exchanges.repositories.interfaces import IExchangeRepository

__all__ = ["ExchangeDjangoRepository", "IExchangeRepository"]
