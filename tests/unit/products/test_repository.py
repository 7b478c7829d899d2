"""Unit tests for ProductDjangoRepository.

Covers:
- get_by_external_id / save / deactivate.
- Active-only queries (store, category, title, price range, low stock).
- Paging and ordering of ``list_page``.
- Stock mutations: absolute set and conditional decrement.
"""

from __future__ import annotations

from decimal import Decimal

import pytest
from freezegun import freeze_time

from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import IProductRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo():
    return ProductDjangoRepository()


def _make_product(**overrides) -> Product:
    defaults = {
        "title": "Widget",
        "price": Decimal("19.99"),
        "store_id": "STORE-001",
        "category": "Tools",
        "stock": 10,
    }
    defaults.update(overrides)
    product = Product(**defaults)
    product.save()
    return product


# ===========================================================================
# Basics
# ===========================================================================


class TestRepositoryInstantiation:
    def test_is_instance_of_interface(self, repo):
        assert isinstance(repo, IProductRepository)


class TestGetByExternalId:
    def test_found(self, repo):
        product = _make_product()
        assert repo.get_by_external_id(product.external_id) == product

    def test_returns_inactive_product(self, repo):
        product = _make_product(active=False)
        assert repo.get_by_external_id(product.external_id) == product

    def test_unknown_returns_none(self, repo):
        assert repo.get_by_external_id("does-not-exist") is None


class TestSave:
    def test_creates_and_updates(self, repo):
        product = repo.save(Product(
            title="Widget",
            price=Decimal("1.50"),
            store_id="STORE-001",
            category="Tools",
            stock=1,
        ))
        assert product.pk is not None

        product.title = "Renamed"
        repo.save(product)
        assert Product.objects.get(pk=product.pk).title == "Renamed"


class TestDeactivate:
    def test_soft_deletes(self, repo):
        product = _make_product()
        assert repo.deactivate(product.external_id) == 1

        product.refresh_from_db()
        assert product.active is False

    def test_unknown_returns_zero(self, repo):
        assert repo.deactivate("does-not-exist") == 0

    def test_already_inactive_still_counts(self, repo):
        product = _make_product(active=False)
        assert repo.deactivate(product.external_id) == 1


# ===========================================================================
# Queries
# ===========================================================================


class TestActiveQueries:
    def test_by_store_excludes_inactive_and_other_stores(self, repo):
        kept = _make_product(title="Kept")
        _make_product(title="Gone", active=False)
        _make_product(title="Other", store_id="STORE-002")

        assert repo.list_active_by_store("STORE-001") == [kept]
        assert repo.count_active_by_store("STORE-001") == 1

    def test_by_category_is_paged(self, repo):
        for i in range(5):
            _make_product(title=f"Book {i}", category="Books")
        _make_product(title="Dead book", category="Books", active=False)

        items, total = repo.list_active_by_category("Books", 1, 2)
        assert total == 5
        assert len(items) == 2

    def test_search_is_case_insensitive_substring(self, repo):
        phone = _make_product(title="iPhone 15 Pro")
        _make_product(title="Galaxy S24")
        _make_product(title="Old iPhone", active=False)

        assert repo.search_active_by_title("IPHONE") == [phone]

    def test_price_range_is_inclusive(self, repo):
        low = _make_product(title="Low", price=Decimal("10.00"))
        high = _make_product(title="High", price=Decimal("20.00"))
        _make_product(title="Out", price=Decimal("20.01"))

        found = repo.list_active_by_price_range(Decimal("10.00"), Decimal("20.00"))
        assert set(found) == {low, high}

    def test_low_stock_is_strictly_below_threshold(self, repo):
        scarce = _make_product(title="Scarce", stock=9)
        _make_product(title="Edge", stock=10)
        _make_product(title="Hidden", stock=0, active=False)

        assert repo.list_active_low_stock(10) == [scarce]

    def test_exists_active(self, repo):
        alive = _make_product()
        dead = _make_product(title="Dead", active=False)

        assert repo.exists_active(alive.external_id) is True
        assert repo.exists_active(dead.external_id) is False
        assert repo.exists_active("does-not-exist") is False


class TestListPage:
    def test_includes_inactive_and_counts_all(self, repo):
        _make_product(title="Alive")
        _make_product(title="Dead", active=False)

        items, total = repo.list_page(0, 10, ["-created_at", "-id"])
        assert total == 2
        assert len(items) == 2

    def test_ordering_and_offset(self, repo):
        for price in ("3.00", "1.00", "2.00"):
            _make_product(title=f"P{price}", price=Decimal(price))

        items, total = repo.list_page(1, 2, ["price", "id"])
        assert total == 3
        assert [p.price for p in items] == [Decimal("3.00")]

    def test_page_past_end_is_empty(self, repo):
        _make_product()
        items, total = repo.list_page(5, 10, ["id"])
        assert items == []
        assert total == 1


# ===========================================================================
# Stock mutations
# ===========================================================================


class TestSetStock:
    def test_sets_absolute_value_and_stamps(self, repo):
        with freeze_time("2026-01-01 10:00:00"):
            product = _make_product(stock=5)
        with freeze_time("2026-01-01 12:00:00"):
            assert repo.set_stock(product.external_id, 100) == 1

        product.refresh_from_db()
        assert product.stock == 100
        assert product.updated_at > product.created_at

    def test_unknown_returns_zero(self, repo):
        assert repo.set_stock("does-not-exist", 1) == 0


class TestDecrementStock:
    def test_decrements(self, repo):
        product = _make_product(stock=10)
        assert repo.decrement_stock(product.external_id, 4) == 1

        product.refresh_from_db()
        assert product.stock == 6

    def test_exact_amount_reaches_zero(self, repo):
        product = _make_product(stock=3)
        assert repo.decrement_stock(product.external_id, 3) == 1

        product.refresh_from_db()
        assert product.stock == 0

    def test_insufficient_stock_leaves_row_untouched(self, repo):
        product = _make_product(stock=2)
        assert repo.decrement_stock(product.external_id, 3) == 0

        product.refresh_from_db()
        assert product.stock == 2
