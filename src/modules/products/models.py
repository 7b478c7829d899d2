"""Product model with external identifier, stock control and soft delete.

Business rules implemented at the data layer:
- ``external_id`` is unique across all rows, active or not, and never changes.
- ``price`` lies in ``[0.01, 99999.99]`` (validators + DB check constraint).
- ``stock`` lies in ``[0, 10000]`` and can never go negative (validators +
  DB check constraint).
- Soft delete flips ``active`` to ``False``; rows are never removed.
"""

from __future__ import annotations

import uuid6
from django.core.validators import (
    MaxLengthValidator,
    MaxValueValidator,
    MinLengthValidator,
    MinValueValidator,
    RegexValidator,
)
from django.db import models

from modules.core.models import ActiveManager, BaseModel
from modules.products.constants import (
    DESCRIPTION_MAX_LENGTH,
    MAX_PRICE,
    MAX_STOCK,
    MIN_PRICE,
    STORE_ID_PATTERN,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)


def generate_external_id() -> str:
    """Time-ordered UUIDv7, rendered as its canonical string."""
    return str(uuid6.uuid7())


class Product(BaseModel):
    """Product aggregate root.

    ``id`` is the internal surrogate key and is never exposed; APIs address
    products by ``external_id``.
    """

    external_id = models.CharField(
        max_length=36,
        unique=True,
        default=generate_external_id,
        editable=False,
    )
    title = models.CharField(
        max_length=TITLE_MAX_LENGTH,
        validators=[MinLengthValidator(TITLE_MIN_LENGTH)],
    )
    description = models.TextField(  # noqa: DJ001
        null=True,
        blank=True,
        default=None,
        validators=[MaxLengthValidator(DESCRIPTION_MAX_LENGTH)],
    )
    price = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        validators=[MinValueValidator(MIN_PRICE), MaxValueValidator(MAX_PRICE)],
    )
    store_id = models.CharField(
        max_length=64,
        validators=[RegexValidator(STORE_ID_PATTERN)],
    )
    category = models.CharField(max_length=100)
    stock = models.PositiveIntegerField(
        validators=[MaxValueValidator(MAX_STOCK)],
    )
    active = models.BooleanField(default=True)

    objects = ActiveManager()

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["store_id"], name="idx_product_store"),
            models.Index(fields=["category"], name="idx_product_category"),
            models.Index(fields=["active"], name="idx_product_active"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.store_id} - {self.title}"
