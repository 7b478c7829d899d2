from io import StringIO

import pytest
from django.core.management import call_command

from modules.products.models import Product

pytestmark = pytest.mark.integration


def _seed(*args) -> str:
    out = StringIO()
    call_command("seed_products", *args, stdout=out)
    return out.getvalue()


class TestSeedProducts:
    def test_seeds_full_catalog(self):
        output = _seed()

        assert Product.objects.filter(store_id="STORE-001").count() == 12
        assert "Seed completed: store=STORE-001, products=12" in output

    def test_is_idempotent(self):
        _seed("--count", "3")
        output = _seed("--count", "3")

        assert Product.objects.count() == 3
        assert "products=0" in output

    def test_custom_store(self):
        _seed("--store", "STORE-777", "--count", "2")

        assert set(Product.objects.values_list("store_id", flat=True)) == {"STORE-777"}

    def test_seeded_products_are_valid(self):
        _seed("--count", "4", "--seed", "7")

        for product in Product.objects.all():
            product.full_clean()
            assert product.active is True
            assert product.created_at == product.updated_at
