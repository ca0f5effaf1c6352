from django.apps import AppConfig


class ExchangesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.exchanges"
    label = "exchanges"

    def ready(self) -> None:
        from modules.exchanges.events import (
            ExchangeCompleted,
            ExchangeProposed,
            ExchangeRejected,
        )
        from modules.exchanges.handlers import (
            exchange_completed_handler,
            exchange_proposed_handler,
            exchange_rejected_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(ExchangeProposed, exchange_proposed_handler)
        event_bus.subscribe(ExchangeCompleted, exchange_completed_handler)
        event_bus.subscribe(ExchangeRejected, exchange_rejected_handler)
