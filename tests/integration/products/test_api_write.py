"""Integration tests for product create / update / delete over HTTP."""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

import pytest
from django.conf import settings

from modules.products.constants import ProductStatus
from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


def _payload(image, **overrides):
    data = {
        "title": "Road bike",
        "description": "Aluminium frame",
        "category": "sports",
        "condition": "used",
        "image": image,
    }
    data.update(overrides)
    return data


class TestCreateProduct:
    def test_multipart_create_returns_201(self, client_for, alice, png_upload):
        response = client_for(alice).post(URL, _payload(png_upload()), format="multipart")

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Road bike"
        assert data["owner"] == alice.pk
        assert data["owner_username"] == "alice"
        assert data["status"] == ProductStatus.ACTIVE
        assert data["release_date"]
        assert data["image"].startswith(settings.MEDIA_URL + "products/")
        assert data["image"].endswith("_photo.png")

    def test_image_is_written_to_media_root(self, client_for, alice, png_upload):
        response = client_for(alice).post(URL, _payload(png_upload()), format="multipart")

        relative = response.json()["image"].removeprefix(settings.MEDIA_URL)
        assert (Path(settings.MEDIA_ROOT) / relative).is_file()

    def test_created_jpg_product_is_retrievable_by_id(self, client_for, alice, png_upload):
        client = client_for(alice)
        created = client.post(
            URL,
            _payload(png_upload("photo.jpg"), category="music", condition="new"),
            format="multipart",
        ).json()

        response = client.get(f"{URL}{created['id']}/")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == created["title"] == "Road bike"
        assert data["category"] == "music"
        assert data["condition"] == "new"
        assert data["image"] == created["image"]
        assert data["image"].startswith(settings.MEDIA_URL + "products/")
        assert data["image"].endswith("_photo.jpg")

    def test_create_logs_a_single_creation_line(self, client_for, alice, png_upload, caplog):
        with caplog.at_level(logging.INFO):
            client_for(alice).post(URL, _payload(png_upload()), format="multipart")

        messages = [r.getMessage() for r in caplog.records]
        assert len([m for m in messages if "product.created" in m]) == 1
        assert not [m for m in messages if "product_created" in m]

    def test_owner_comes_from_token_not_payload(self, client_for, alice, bob, png_upload):
        response = client_for(alice).post(
            URL, _payload(png_upload(), owner=bob.pk), format="multipart"
        )

        assert response.status_code == 201
        assert Product.objects.get(id=response.json()["id"]).owner == alice

    @pytest.mark.parametrize("name", ["photo.gif", "photo", "photo.png.exe"])
    def test_bad_extension_returns_400(self, client_for, alice, png_upload, name):
        response = client_for(alice).post(URL, _payload(png_upload(name)), format="multipart")

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_input"
        assert not Product.objects.exists()

    def test_missing_image_returns_400(self, client_for, alice):
        data = _payload(None)
        del data["image"]

        response = client_for(alice).post(URL, data, format="multipart")

        assert response.status_code == 400
        assert not Product.objects.exists()

    def test_empty_image_returns_400(self, client_for, alice, png_upload):
        response = client_for(alice).post(
            URL, _payload(png_upload(content=b"")), format="multipart"
        )

        assert response.status_code == 400
        assert not Product.objects.exists()

    def test_missing_title_returns_validation_error(self, client_for, alice, png_upload):
        data = _payload(png_upload())
        del data["title"]

        response = client_for(alice).post(URL, data, format="multipart")

        assert response.status_code == 400
        body = response.json()
        assert body["type"] == "validation_error"
        assert body["errors"][0]["attr"] == "title"


class TestUpdateProduct:
    def test_owner_can_patch_fields(self, client_for, alice, make_product):
        product = make_product(alice)

        response = client_for(alice).patch(
            f"{URL}{product.id}/", {"title": "Gravel bike"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Gravel bike"
        assert response.json()["category"] == "sports"

    def test_status_cannot_be_changed(self, client_for, alice, make_product):
        product = make_product(alice)

        client_for(alice).patch(
            f"{URL}{product.id}/", {"status": ProductStatus.INACTIVE}, format="json"
        )

        product.refresh_from_db()
        assert product.status == ProductStatus.ACTIVE

    def test_replaces_image(self, client_for, alice, make_product, png_upload):
        product = make_product(alice)

        response = client_for(alice).patch(
            f"{URL}{product.id}/", {"image": png_upload("new.png")}, format="multipart"
        )

        assert response.status_code == 200
        assert response.json()["image"].endswith("_new.png")

    def test_non_owner_gets_403(self, client_for, alice, bob, make_product):
        product = make_product(alice)

        response = client_for(bob).patch(
            f"{URL}{product.id}/", {"title": "Mine now"}, format="json"
        )

        assert response.status_code == 403
        product.refresh_from_db()
        assert product.title == "Road bike"

    def test_unknown_product_gets_404(self, client_for, alice):
        response = client_for(alice).patch(
            f"{URL}{uuid.uuid4()}/", {"title": "x"}, format="json"
        )
        assert response.status_code == 404


class TestDeleteProduct:
    def test_owner_soft_deletes(self, client_for, alice, make_product):
        product = make_product(alice)

        response = client_for(alice).delete(f"{URL}{product.id}/")

        assert response.status_code == 204
        product.refresh_from_db()
        assert product.status == ProductStatus.INACTIVE

    def test_delete_is_idempotent(self, client_for, alice, make_product):
        product = make_product(alice, status=ProductStatus.INACTIVE)

        response = client_for(alice).delete(f"{URL}{product.id}/")

        assert response.status_code == 204

    def test_non_owner_gets_403(self, client_for, alice, bob, make_product):
        product = make_product(alice)

        response = client_for(bob).delete(f"{URL}{product.id}/")

        assert response.status_code == 403
        product.refresh_from_db()
        assert product.status == ProductStatus.ACTIVE

    def test_deleted_product_is_still_retrievable(self, client_for, alice, make_product):
        product = make_product(alice)
        client = client_for(alice)
        client.delete(f"{URL}{product.id}/")

        response = client.get(f"{URL}{product.id}/")

        assert response.status_code == 200
        assert response.json()["status"] == ProductStatus.INACTIVE
