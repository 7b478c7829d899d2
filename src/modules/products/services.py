"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository`` and representation to
``ProductMapper``.  Every public method returns DTOs, never model instances.

Active-flag semantics (kept deliberately asymmetric):
- ``get_product`` and ``list_products`` see soft-deleted products; every
  other read is active only.
- ``update_stock`` requires an *active* product; ``update_product`` and
  ``reduce_stock`` accept inactive ones.

Caching: ``get_product`` reads through the injected cache under
``products:<external_id>``.  Mutations delete that key once their
transaction commits; the cache is never written on mutation.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.conf import settings
from django.core.cache import cache as default_cache
from django.db import transaction

from modules.products.constants import (
    CACHE_KEY_PREFIX,
    SORT_DIRECTIONS,
    SORTABLE_FIELDS,
)
from modules.products.exceptions import (
    InsufficientStock,
    InvalidSortParameter,
    ProductNotFound,
)
from modules.products.mappers import ProductMapper

if TYPE_CHECKING:
    from django.core.cache.backends.base import BaseCache

    from modules.products.dtos import (
        CreateProductDTO,
        ProductOutputDTO,
        ProductPageDTO,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


def product_cache_key(external_id: str) -> str:
    return f"{CACHE_KEY_PREFIX}:{external_id}"


class ProductService:
    """Application service for Product use-cases.

    Collaborators are injected through the constructor: the repository is
    required; the cache defaults to Django's default cache and the mapper
    to a fresh ``ProductMapper``.
    """

    def __init__(
        self,
        repository: IProductRepository,
        cache: Optional[BaseCache] = None,
        mapper: Optional[ProductMapper] = None,
        cache_timeout: Optional[int] = None,
        max_page_size: Optional[int] = None,
    ) -> None:
        self._repo = repository
        self._cache = cache if cache is not None else default_cache
        self._mapper = mapper or ProductMapper()
        self._cache_timeout = (
            cache_timeout
            if cache_timeout is not None
            else settings.PRODUCT_CACHE_TIMEOUT
        )
        self._max_page_size = (
            max_page_size
            if max_page_size is not None
            else settings.PRODUCT_MAX_PAGE_SIZE
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> ProductOutputDTO:
        """Persist a new, active product."""
        log = logger.bind(store_id=dto.store_id, title=dto.title)
        log.info("product.creating")

        product = self._repo.save(self._mapper.to_entity(dto))

        log.info("product.created", product_id=product.external_id)
        return self._mapper.to_response(product)

    @transaction.atomic
    def update_product(
        self, external_id: str, dto: UpdateProductDTO
    ) -> ProductOutputDTO:
        """Apply the non-null fields of ``dto`` to a product, active or not.

        Raises:
            ProductNotFound: if no product has this external id.
        """
        product = self._get_or_raise(external_id)

        self._mapper.update_entity_from_request(dto, product)
        product = self._repo.save(product)
        self._evict(external_id)

        logger.info("product.updated", product_id=external_id)
        return self._mapper.to_response(product)

    @transaction.atomic
    def update_stock(self, external_id: str, quantity: int) -> None:
        """Set the stock of an *active* product to ``quantity``.

        Raises:
            ProductNotFound: if no active product has this external id, or
                the product vanished between the check and the update.
        """
        log = logger.bind(product_id=external_id, quantity=quantity)
        log.info("product.stock_updating")

        if not self._repo.exists_active(external_id):
            raise ProductNotFound(f"Product not found with UUID: {external_id}")

        if self._repo.set_stock(external_id, quantity) == 0:
            raise ProductNotFound(
                f"Failed to update stock for product UUID: {external_id}"
            )
        self._evict(external_id)

        log.info("product.stock_updated")

    @transaction.atomic
    def reduce_stock(self, external_id: str, quantity: int) -> None:
        """Take ``quantity`` units out of a product's stock, active or not.

        The subtraction is a conditional ``UPDATE`` so concurrent reductions
        can never push stock below zero.

        Raises:
            ProductNotFound: if no product has this external id.
            InsufficientStock: if the product holds fewer than ``quantity``.
        """
        log = logger.bind(product_id=external_id, quantity=quantity)
        log.info("product.stock_reducing")

        product = self._get_or_raise(external_id)
        if product.stock < quantity:
            log.warning("product.insufficient_stock", available=product.stock)
            raise InsufficientStock(product.stock, quantity)

        if self._repo.decrement_stock(external_id, quantity) == 0:
            # Lost a race: re-read to report what is there now.
            current = self._get_or_raise(external_id)
            log.warning("product.insufficient_stock", available=current.stock)
            raise InsufficientStock(current.stock, quantity)
        self._evict(external_id)

        log.info("product.stock_reduced")

    @transaction.atomic
    def delete_product(self, external_id: str) -> None:
        """Soft-delete a product.

        Raises:
            ProductNotFound: if no product has this external id.
        """
        if self._repo.deactivate(external_id) == 0:
            raise ProductNotFound(f"Product not found with UUID: {external_id}")
        self._evict(external_id)

        logger.info("product.soft_deleted", product_id=external_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, external_id: str) -> ProductOutputDTO:
        """Retrieve a single product, active or not, via the cache.

        Raises:
            ProductNotFound: if no product has this external id.
        """
        key = product_cache_key(external_id)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("product.cache_hit", product_id=external_id)
            return cached

        product = self._get_or_raise(external_id)
        dto = self._mapper.to_response(product)
        self._cache.set(key, dto, self._cache_timeout)

        logger.info("product.retrieved", product_id=external_id)
        return dto

    def list_products(
        self, page: int, size: int, sort_by: str, sort_direction: str
    ) -> ProductPageDTO:
        """One page of ALL products, soft-deleted ones included.

        Raises:
            InvalidSortParameter: on an unknown sort field or direction.
        """
        ordering = self._ordering(sort_by, sort_direction)
        size = min(size, self._max_page_size)
        logger.info(
            "product.listing",
            page=page,
            size=size,
            sort_by=sort_by,
            sort_direction=sort_direction,
        )
        products, total = self._repo.list_page(page, size, ordering)
        return self._mapper.to_page(products, total, page, size)

    def get_products_by_store(self, store_id: str) -> List[ProductOutputDTO]:
        logger.info("product.listing_by_store", store_id=store_id)
        return self._mapper.to_response_list(
            self._repo.list_active_by_store(store_id)
        )

    def get_products_by_category(
        self, category: str, page: int, size: int
    ) -> ProductPageDTO:
        size = min(size, self._max_page_size)
        logger.info("product.listing_by_category", category=category, page=page)
        products, total = self._repo.list_active_by_category(category, page, size)
        return self._mapper.to_page(products, total, page, size)

    def search_products(self, title: str) -> List[ProductOutputDTO]:
        logger.info("product.searching", title=title)
        return self._mapper.to_response_list(
            self._repo.search_active_by_title(title)
        )

    def get_products_by_price_range(
        self, min_price: Decimal, max_price: Decimal
    ) -> List[ProductOutputDTO]:
        logger.info("product.listing_by_price", min_price=min_price, max_price=max_price)
        return self._mapper.to_response_list(
            self._repo.list_active_by_price_range(min_price, max_price)
        )

    def get_low_stock_products(self, threshold: int) -> List[ProductOutputDTO]:
        logger.info("product.listing_low_stock", threshold=threshold)
        return self._mapper.to_response_list(
            self._repo.list_active_low_stock(threshold)
        )

    def get_product_count_by_store(self, store_id: str) -> int:
        logger.info("product.counting_by_store", store_id=store_id)
        return self._repo.count_active_by_store(store_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, external_id: str):
        product = self._repo.get_by_external_id(external_id)
        if product is None:
            raise ProductNotFound(f"Product not found with UUID: {external_id}")
        return product

    def _evict(self, external_id: str) -> None:
        key = product_cache_key(external_id)
        transaction.on_commit(lambda: self._cache.delete(key))

    @staticmethod
    def _ordering(sort_by: str, sort_direction: str) -> List[str]:
        column = SORTABLE_FIELDS.get(sort_by)
        if column is None and sort_by in SORTABLE_FIELDS.values():
            column = sort_by
        if column is None:
            raise InvalidSortParameter(f"Unsupported sort field: {sort_by}")

        direction = sort_direction.lower()
        if direction not in SORT_DIRECTIONS:
            raise InvalidSortParameter(
                f"Unsupported sort direction: {sort_direction}"
            )

        prefix = "-" if direction == "desc" else ""
        return [f"{prefix}{column}", f"{prefix}id"]
