"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
and mutations return affected-row counts instead of raising; the Service
Layer decides how to translate a missing product into an API response.

Mutations by external id are single ``UPDATE`` statements, so they bypass
``Model.save()``; each one stamps ``updated_at`` explicitly.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

import structlog
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_external_id(self, external_id: str) -> Optional[Product]:
        """Retrieve a product by external id, whether active or not."""
        return Product.objects.filter(external_id=external_id).first()

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=entity.external_id,
            store_id=entity.store_id,
        )
        return entity

    @transaction.atomic
    def deactivate(self, external_id: str) -> int:
        """Soft-delete by external id; already-inactive rows still count."""
        updated = Product.objects.filter(external_id=external_id).deactivate()
        if updated:
            logger.info("product.deactivated", product_id=external_id)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_page(
        self, page: int, size: int, ordering: Sequence[str]
    ) -> Tuple[List[Product], int]:
        queryset = Product.objects.order_by(*ordering)
        return self._slice(queryset, page, size)

    def list_active_by_store(self, store_id: str) -> List[Product]:
        return list(Product.objects.active().filter(store_id=store_id))

    def list_active_by_category(
        self, category: str, page: int, size: int
    ) -> Tuple[List[Product], int]:
        queryset = Product.objects.active().filter(category=category)
        return self._slice(queryset, page, size)

    def search_active_by_title(self, title: str) -> List[Product]:
        return list(Product.objects.active().filter(title__icontains=title))

    def list_active_by_price_range(
        self, min_price: Decimal, max_price: Decimal
    ) -> List[Product]:
        return list(
            Product.objects.active().filter(price__range=(min_price, max_price))
        )

    def list_active_low_stock(self, threshold: int) -> List[Product]:
        return list(Product.objects.active().filter(stock__lt=threshold))

    def count_active_by_store(self, store_id: str) -> int:
        return Product.objects.active().filter(store_id=store_id).count()

    def exists_active(self, external_id: str) -> bool:
        return Product.objects.active().filter(external_id=external_id).exists()

    # ------------------------------------------------------------------
    # Stock mutations
    # ------------------------------------------------------------------

    @transaction.atomic
    def set_stock(self, external_id: str, quantity: int) -> int:
        return Product.objects.filter(external_id=external_id).update(
            stock=quantity, updated_at=timezone.now()
        )

    @transaction.atomic
    def decrement_stock(self, external_id: str, quantity: int) -> int:
        return Product.objects.filter(
            external_id=external_id, stock__gte=quantity
        ).update(stock=F("stock") - quantity, updated_at=timezone.now())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _slice(queryset, page: int, size: int) -> Tuple[List[Product], int]:
        total = queryset.count()
        offset = page * size
        return list(queryset[offset : offset + size]), total
