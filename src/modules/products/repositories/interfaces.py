"""Product repository interface.

Extends ``IRepository[Product]`` with the queries the product service
needs.  Each method states whether it sees soft-deleted rows: "active only"
methods exclude ``active=False`` products, the others see every row.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Sequence, Tuple

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def list_page(
        self, page: int, size: int, ordering: Sequence[str]
    ) -> Tuple[List[Product], int]:
        """One zero-based page of ALL products plus the total row count."""

    @abstractmethod
    def list_active_by_store(self, store_id: str) -> List[Product]:
        """Active only: products of a store."""

    @abstractmethod
    def list_active_by_category(
        self, category: str, page: int, size: int
    ) -> Tuple[List[Product], int]:
        """Active only: one page of a category plus its total count."""

    @abstractmethod
    def search_active_by_title(self, title: str) -> List[Product]:
        """Active only: case-insensitive substring match on ``title``."""

    @abstractmethod
    def list_active_by_price_range(
        self, min_price: Decimal, max_price: Decimal
    ) -> List[Product]:
        """Active only: ``min_price <= price <= max_price``."""

    @abstractmethod
    def list_active_low_stock(self, threshold: int) -> List[Product]:
        """Active only: ``stock < threshold``."""

    @abstractmethod
    def count_active_by_store(self, store_id: str) -> int:
        """Active only: number of products of a store."""

    @abstractmethod
    def exists_active(self, external_id: str) -> bool:
        """Active only: whether an active product has this external id."""

    @abstractmethod
    def set_stock(self, external_id: str, quantity: int) -> int:
        """Set ``stock`` to ``quantity`` on any row; return affected rows."""

    @abstractmethod
    def decrement_stock(self, external_id: str, quantity: int) -> int:
        """Atomically subtract ``quantity`` where ``stock >= quantity``.

        Sees every row.  Returns the number of affected rows: ``0`` means the
        product is gone or no longer holds enough stock.
        """
