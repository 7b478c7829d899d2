"""Unit tests for the Product model and the soft-delete queryset."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
import uuid6
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from freezegun import freeze_time

from modules.products.models import Product

pytestmark = pytest.mark.unit


def _make_product(**overrides) -> Product:
    defaults = {
        "title": "Widget",
        "description": "A useful widget",
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
# Creation
# ===========================================================================


class TestProductCreation:
    def test_defaults(self):
        product = _make_product()
        assert product.pk is not None
        assert product.active is True

    def test_external_id_is_uuid7(self):
        product = _make_product()
        parsed = uuid6.UUID(product.external_id)
        assert parsed.version == 7
        assert str(parsed) == product.external_id

    def test_external_ids_are_unique(self):
        first = _make_product()
        second = _make_product(title="Gadget")
        assert first.external_id != second.external_id

    def test_timestamps_equal_on_create(self):
        product = _make_product()
        assert product.created_at == product.updated_at

    def test_description_may_be_null(self):
        product = _make_product(description=None)
        product.refresh_from_db()
        assert product.description is None

    def test_str(self):
        assert str(_make_product()) == "STORE-001 - Widget"


# ===========================================================================
# Timestamps on update
# ===========================================================================


class TestProductTimestamps:
    def test_save_refreshes_updated_at(self):
        with freeze_time("2026-01-01 10:00:00"):
            product = _make_product()
        with freeze_time("2026-01-01 11:00:00"):
            product.title = "Renamed"
            product.save()

        product.refresh_from_db()
        assert product.updated_at - product.created_at == timedelta(hours=1)

    def test_save_with_update_fields_still_writes_updated_at(self):
        with freeze_time("2026-01-01 10:00:00"):
            product = _make_product()
        with freeze_time("2026-01-02 10:00:00"):
            product.stock = 3
            product.save(update_fields=["stock"])

        product.refresh_from_db()
        assert product.stock == 3
        assert product.updated_at > product.created_at

    def test_created_at_never_changes(self):
        with freeze_time("2026-01-01 10:00:00"):
            product = _make_product()
            created = product.created_at
        with freeze_time("2026-03-01 10:00:00"):
            product.save()

        product.refresh_from_db()
        assert product.created_at == created


# ===========================================================================
# Field validation
# ===========================================================================


class TestProductValidators:
    def test_valid_product_passes_full_clean(self):
        product = Product(
            title="Widget",
            price=Decimal("1.00"),
            store_id="STORE-1",
            category="Tools",
            stock=0,
        )
        product.full_clean()

    @pytest.mark.parametrize(
        "field,value",
        [
            ("title", "A"),
            ("price", Decimal("0.00")),
            ("price", Decimal("100000.00")),
            ("store_id", "store 1"),
            ("store_id", "STORE-1\n"),
            ("stock", 10001),
            ("description", "x" * 1001),
        ],
    )
    def test_invalid_value_fails_full_clean(self, field, value):
        data = {
            "title": "Widget",
            "price": Decimal("1.00"),
            "store_id": "STORE-1",
            "category": "Tools",
            "stock": 5,
        }
        data[field] = value
        with pytest.raises(ValidationError) as exc_info:
            Product(**data).full_clean()
        assert field in exc_info.value.message_dict


class TestProductConstraints:
    def test_zero_price_rejected_by_database(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            _make_product(price=Decimal("0.00"))

    def test_negative_stock_rejected_by_database(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            _make_product(stock=-1)

    def test_duplicate_external_id_rejected(self):
        product = _make_product()
        with pytest.raises(IntegrityError), transaction.atomic():
            _make_product(external_id=product.external_id)


# ===========================================================================
# ActiveQuerySet
# ===========================================================================


class TestActiveQuerySet:
    def test_active_and_inactive_partition(self):
        kept = _make_product(title="Kept")
        gone = _make_product(title="Gone", active=False)

        assert list(Product.objects.active()) == [kept]
        assert list(Product.objects.inactive()) == [gone]
        assert Product.objects.count() == 2

    def test_deactivate_returns_row_count_and_stamps(self):
        with freeze_time("2026-01-01 10:00:00"):
            product = _make_product()
        with freeze_time("2026-01-05 10:00:00"):
            updated = Product.objects.filter(pk=product.pk).deactivate()

        product.refresh_from_db()
        assert updated == 1
        assert product.active is False
        assert product.updated_at > product.created_at

    def test_deactivate_counts_already_inactive_rows(self):
        product = _make_product(active=False)
        assert Product.objects.filter(pk=product.pk).deactivate() == 1

    def test_default_ordering_is_newest_first(self):
        with freeze_time("2026-01-01"):
            older = _make_product(title="Older")
        with freeze_time("2026-01-02"):
            newer = _make_product(title="Newer")

        assert list(Product.objects.all()) == [newer, older]
