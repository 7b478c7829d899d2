"""Mapping between the ``Product`` model and the product DTOs.

Pure functions over their arguments: nothing here touches the database.
"""

from __future__ import annotations

import math
from typing import Iterable, List

from modules.products.dtos import (
    CreateProductDTO,
    ProductOutputDTO,
    ProductPageDTO,
    UpdateProductDTO,
)
from modules.products.models import Product

# Fields an update request may touch, in the order they are applied.
UPDATABLE_FIELDS = ("title", "description", "price", "stock")


class ProductMapper:
    """Translate between persistence and API representations."""

    def to_response(self, product: Product) -> ProductOutputDTO:
        return ProductOutputDTO(
            external_id=product.external_id,
            title=product.title,
            description=product.description,
            price=product.price,
            store_id=product.store_id,
            category=product.category,
            stock=product.stock,
            active=product.active,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )

    def to_response_list(self, products: Iterable[Product]) -> List[ProductOutputDTO]:
        return [self.to_response(product) for product in products]

    def to_entity(self, dto: CreateProductDTO) -> Product:
        """Build an unsaved ``Product``.

        ``external_id``, ``active`` and the timestamps take the model defaults.
        """
        return Product(
            title=dto.title,
            description=dto.description,
            price=dto.price,
            store_id=dto.store_id,
            category=dto.category,
            stock=dto.stock,
        )

    def update_entity_from_request(
        self, dto: UpdateProductDTO, product: Product
    ) -> Product:
        """Copy the non-null fields of ``dto`` onto ``product`` in place."""
        for field in UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)
        return product

    def to_page(
        self, products: Iterable[Product], total: int, page: int, size: int
    ) -> ProductPageDTO:
        total_pages = math.ceil(total / size) if size else 0
        return ProductPageDTO(
            content=self.to_response_list(products),
            total_elements=total,
            total_pages=total_pages,
            number=page,
            size=size,
            first=page == 0,
            last=page + 1 >= total_pages,
        )
