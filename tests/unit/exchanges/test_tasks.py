"""Unit tests for the reconciliation Celery task."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from modules.exchanges.constants import ExchangeStatus
from modules.exchanges.reconciliation import ReconciliationResult
from modules.exchanges.tasks import reconcile_exchanged_products
from modules.products.constants import ProductStatus

pytestmark = pytest.mark.unit


def test_task_is_registered_under_its_public_name():
    assert reconcile_exchanged_products.name == "exchanges.reconcile_exchanged_products"


def test_task_returns_counters(alice, bob, make_product, make_exchange):
    bike, guitar = make_product(alice), make_product(bob)
    make_exchange(bike, guitar, status=ExchangeStatus.COMPLETED)

    result = reconcile_exchanged_products.delay()

    assert result.successful()
    assert result.result == {"scanned": 1, "deactivated": 2, "failed": 0}
    bike.refresh_from_db()
    assert bike.status == ProductStatus.INACTIVE


def test_task_does_not_raise_on_item_failures():
    failed = ReconciliationResult(scanned=2, deactivated=0, failed=2)
    with patch(
        "modules.exchanges.tasks.ExchangeReconciler.run", return_value=failed
    ):
        assert reconcile_exchanged_products() == failed.as_dict()
