"""Exchange URL configuration."""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.exchanges.views import ExchangeViewSet

router = SimpleRouter(trailing_slash=True)
router.register("exchanges", ExchangeViewSet, basename="exchange")

urlpatterns = router.urls
