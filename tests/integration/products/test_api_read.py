"""Integration tests for product listings and retrieval."""

from __future__ import annotations

import uuid

import pytest

from modules.products.constants import ProductStatus

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


def _titles(response) -> set[str]:
    return {item["title"] for item in response.json()["results"]}


class TestListProducts:
    def test_lists_only_active_products(self, client_for, alice, bob, make_product):
        make_product(alice, title="Bike")
        make_product(bob, title="Old lamp", status=ProductStatus.INACTIVE)

        response = client_for(bob).get(URL)

        assert response.status_code == 200
        assert _titles(response) == {"Bike"}

    def test_filter_by_category(self, client_for, alice, make_product):
        make_product(alice, title="Bike", category="sports")
        make_product(alice, title="Dune", category="books")

        response = client_for(alice).get(URL, {"category": "books"})

        assert _titles(response) == {"Dune"}

    def test_filter_by_owner(self, client_for, alice, bob, make_product):
        make_product(alice, title="Bike")
        make_product(bob, title="Guitar")

        response = client_for(alice).get(URL, {"owner": bob.pk})

        assert _titles(response) == {"Guitar"}

    def test_title_search_is_case_insensitive(self, client_for, alice, make_product):
        make_product(alice, title="Road Bike")
        make_product(alice, title="Guitar")

        response = client_for(alice).get(URL, {"title": "bike"})

        assert _titles(response) == {"Road Bike"}

    def test_newest_first(self, client_for, alice, make_product):
        make_product(alice, title="First")
        make_product(alice, title="Second")

        results = client_for(alice).get(URL).json()["results"]

        assert [item["title"] for item in results] == ["Second", "First"]


class TestCategoryListing:
    def test_returns_active_products_in_category(self, client_for, alice, bob, make_product):
        make_product(alice, title="Bike", category="sports")
        make_product(bob, title="Ball", category="sports", status=ProductStatus.INACTIVE)
        make_product(bob, title="Dune", category="books")

        response = client_for(alice).get(f"{URL}category/sports/")

        assert response.status_code == 200
        assert _titles(response) == {"Bike"}

    def test_unknown_category_is_empty(self, client_for, alice):
        response = client_for(alice).get(f"{URL}category/nothing/")

        assert response.status_code == 200
        assert response.json()["results"] == []


class TestMyProducts:
    def test_returns_callers_active_products(self, client_for, alice, bob, make_product):
        make_product(alice, title="Bike")
        make_product(alice, title="Lamp", status=ProductStatus.INACTIVE)
        make_product(bob, title="Guitar")

        response = client_for(alice).get(f"{URL}mine/")

        assert response.status_code == 200
        assert _titles(response) == {"Bike"}


class TestRetrieveProduct:
    def test_returns_product(self, client_for, alice, make_product):
        product = make_product(alice)

        response = client_for(alice).get(f"{URL}{product.id}/")

        assert response.status_code == 200
        assert response.json()["id"] == str(product.id)

    @pytest.mark.parametrize("pk", [str(uuid.uuid4()), "not-a-uuid"])
    def test_unknown_or_malformed_id_returns_404(self, client_for, alice, pk):
        response = client_for(alice).get(f"{URL}{pk}/")
        assert response.status_code == 404
