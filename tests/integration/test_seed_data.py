"""Integration tests for the ``seed_data`` management command."""

from __future__ import annotations

from io import StringIO

import pytest
from django.contrib.auth import get_user_model
from django.core.management import call_command

from modules.exchanges.constants import ExchangeStatus
from modules.exchanges.models import Exchange
from modules.products.constants import ProductStatus
from modules.products.models import Product

pytestmark = pytest.mark.integration


def _seed() -> str:
    out = StringIO()
    call_command("seed_data", stdout=out)
    return out.getvalue()


def test_seeds_users_products_and_exchanges():
    output = _seed()

    User = get_user_model()
    assert User.objects.filter(username__in=["admin", "alice", "bob", "carol"]).count() == 4
    assert Product.objects.count() == 8
    assert Exchange.objects.filter(status=ExchangeStatus.PENDING).count() == 1
    assert Exchange.objects.filter(status=ExchangeStatus.COMPLETED).count() == 1
    assert "Seed completed" in output


def test_completed_exchange_deactivated_its_products():
    _seed()

    completed = Exchange.objects.get(status=ExchangeStatus.COMPLETED)
    assert completed.product_from.status == ProductStatus.INACTIVE
    assert completed.product_to.status == ProductStatus.INACTIVE
    assert Product.objects.filter(status=ProductStatus.ACTIVE).count() == 6


def test_second_run_is_skipped():
    _seed()

    output = _seed()

    assert "Skipping" in output
    assert Product.objects.count() == 8
