import pytest

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from rest_framework.test import APIClient

from modules.exchanges.constants import ExchangeStatus
from modules.exchanges.models import Exchange
from modules.products.constants import ProductStatus
from modules.products.models import Product

User = get_user_model()

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\xdac\xfc\xff"
    b"\x9f\xa1\x1e\x00\x07\x82\x02\x7f=\xc8H\xef\x00\x00\x00\x00IEND\xaeB`\x82"
)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Users & clients
# ---------------------------------------------------------------------------


@pytest.fixture()
def alice():
    return User.objects.create_user(username="alice", password="testpass123")


@pytest.fixture()
def bob():
    return User.objects.create_user(username="bob", password="testpass123")


@pytest.fixture()
def client_for():
    """Build an APIClient force-authenticated as ``user``."""

    def _client(user) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client


# ---------------------------------------------------------------------------
# Domain objects
# ---------------------------------------------------------------------------


@pytest.fixture()
def make_product():
    """Persist a Product owned by ``owner``."""

    def _make(owner, **overrides) -> Product:
        defaults = {
            "title": "Road bike",
            "description": "Aluminium frame",
            "category": "sports",
            "condition": "used",
            "image": "/media/products/bike.png",
            "status": ProductStatus.ACTIVE,
        }
        defaults.update(overrides)
        return Product.objects.create(owner=owner, **defaults)

    return _make


@pytest.fixture()
def make_exchange():
    """Persist an Exchange directly, bypassing the service checks."""

    def _make(product_from, product_to, status=ExchangeStatus.PENDING) -> Exchange:
        return Exchange.objects.create(
            product_from=product_from,
            product_to=product_to,
            status=status,
        )

    return _make


@pytest.fixture()
def png_upload():
    """Build a small in-memory PNG upload."""

    def _upload(name: str = "photo.png", content: bytes = PNG_BYTES) -> SimpleUploadedFile:
        return SimpleUploadedFile(name, content, content_type="image/png")

    return _upload
