"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF views) and the
Service layer.  DTOs are immutable (``frozen=True``).

Input DTOs accept the camelCase wire names (``storeId``) as well as the
Python field names (``store_id``).  Every violation is reported: Pydantic
validates all fields before raising, so a single ``ValidationError``
carries the complete list.

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``StockQuantityDTO`` / ``StockReductionDTO``: stock endpoints.
- ``PriceRangeDTO``, ``StockThresholdDTO``, ``SearchQueryDTO``,
  ``PageRequestDTO``: query-string parameters.
- ``ProductOutputDTO`` / ``ProductPageDTO``: output.
"""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.products.constants import (
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    DESCRIPTION_MAX_LENGTH,
    MAX_INT_PARAMETER,
    MAX_PRICE,
    MAX_STOCK,
    MIN_PRICE,
    STORE_ID_PATTERN,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)

_STORE_ID_RE = re.compile(STORE_ID_PATTERN)
_CENT = Decimal("0.01")


# ---------------------------------------------------------------------------
# Shared field rules
# ---------------------------------------------------------------------------


def _check_title(value: str) -> str:
    if not value or not value.strip():
        raise ValueError("Product title is required")
    if not TITLE_MIN_LENGTH <= len(value) <= TITLE_MAX_LENGTH:
        raise ValueError(
            f"Title must be between {TITLE_MIN_LENGTH} and "
            f"{TITLE_MAX_LENGTH} characters"
        )
    return value


def _check_description(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(
            f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"
        )
    return value


def _check_price(value: Decimal) -> Decimal:
    if value < MIN_PRICE:
        raise ValueError("Price must be greater than 0")
    if value > MAX_PRICE:
        raise ValueError("Price is too high")
    if value != value.quantize(_CENT):
        raise ValueError("Price must have at most 2 decimal places")
    return value


def _check_stock(value: int) -> int:
    if value < 0:
        raise ValueError("Stock cannot be negative")
    if value > MAX_STOCK:
        raise ValueError("Stock quantity is too high")
    return value


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``title`` is non-blank, 2 to 100 characters.
    - ``description`` is at most 1000 characters.
    - ``price`` lies in ``[0.01, 99999.99]`` with at most two decimals.
    - ``store_id`` is non-blank and consists only of ``A-Z``, ``0-9`` and ``-``.
    - ``category`` is non-blank.
    - ``stock`` lies in ``[0, 10000]``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    description: Optional[str] = None
    price: Decimal
    store_id: str = Field(alias="storeId")
    category: str
    stock: int

    @field_validator("title")
    @classmethod
    def title_valid(cls, v: str) -> str:
        return _check_title(v)

    @field_validator("description")
    @classmethod
    def description_valid(cls, v: Optional[str]) -> Optional[str]:
        return _check_description(v)

    @field_validator("price")
    @classmethod
    def price_in_range(cls, v: Decimal) -> Decimal:
        return _check_price(v)

    @field_validator("store_id")
    @classmethod
    def store_id_valid(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Store ID is required")
        if not _STORE_ID_RE.fullmatch(v):
            raise ValueError(
                "Store ID must contain only uppercase letters, numbers, and hyphens"
            )
        return v

    @field_validator("category")
    @classmethod
    def category_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Category is required")
        return v

    @field_validator("stock")
    @classmethod
    def stock_in_range(cls, v: int) -> int:
        return _check_stock(v)


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional: only supplied (non-null) fields are applied.
    ``store_id`` and ``category`` cannot be changed after creation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_valid(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not TITLE_MIN_LENGTH <= len(v) <= TITLE_MAX_LENGTH:
            raise ValueError(
                f"Title must be between {TITLE_MIN_LENGTH} and "
                f"{TITLE_MAX_LENGTH} characters"
            )
        return v

    @field_validator("description")
    @classmethod
    def description_valid(cls, v: Optional[str]) -> Optional[str]:
        return _check_description(v)

    @field_validator("price")
    @classmethod
    def price_in_range(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return v if v is None else _check_price(v)

    @field_validator("stock")
    @classmethod
    def stock_in_range(cls, v: Optional[int]) -> Optional[int]:
        return v if v is None else _check_stock(v)


class StockQuantityDTO(BaseModel):
    """New absolute stock level for ``POST /products/{id}/stock``."""

    model_config = ConfigDict(frozen=True)

    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_in_range(cls, v: int) -> int:
        return _check_stock(v)


class StockReductionDTO(BaseModel):
    """Number of units to take out of stock."""

    model_config = ConfigDict(frozen=True)

    quantity: int

    @field_validator("quantity")
    @classmethod
    def quantity_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1")
        return v


class PriceRangeDTO(BaseModel):
    """Inclusive price bounds."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    min_price: Decimal = Field(alias="minPrice")
    max_price: Decimal = Field(alias="maxPrice")

    @field_validator("min_price", "max_price")
    @classmethod
    def bound_not_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price bounds cannot be negative")
        return v

    @model_validator(mode="after")
    def bounds_ordered(self) -> PriceRangeDTO:
        if self.min_price > self.max_price:
            raise ValueError("minPrice must not be greater than maxPrice")
        return self


class StockThresholdDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    threshold: int

    @field_validator("threshold")
    @classmethod
    def threshold_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Threshold cannot be negative")
        if v > MAX_INT_PARAMETER:
            raise ValueError(f"Threshold must not exceed {MAX_INT_PARAMETER}")
        return v


class SearchQueryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str


class PageRequestDTO(BaseModel):
    """Zero-based page request.  Sort parameters are checked by the service."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    page: int = 0
    size: int
    sort_by: str = Field(default=DEFAULT_SORT_FIELD, alias="sortBy")
    sort_direction: str = Field(default=DEFAULT_SORT_DIRECTION, alias="sortDirection")

    @field_validator("page")
    @classmethod
    def page_not_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Page index must not be negative")
        if v > MAX_INT_PARAMETER:
            raise ValueError(f"Page index must not exceed {MAX_INT_PARAMETER}")
        return v

    @field_validator("size")
    @classmethod
    def size_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Page size must be at least 1")
        if v > MAX_INT_PARAMETER:
            raise ValueError(f"Page size must not exceed {MAX_INT_PARAMETER}")
        return v


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class ProductOutputDTO(BaseModel):
    """Immutable DTO for product API responses."""

    model_config = ConfigDict(frozen=True)

    external_id: str
    title: str
    description: Optional[str]
    price: Decimal
    store_id: str
    category: str
    stock: int
    active: bool
    created_at: datetime
    updated_at: datetime


class ProductPageDTO(BaseModel):
    """One page of products plus paging metadata (zero-based ``number``)."""

    model_config = ConfigDict(frozen=True)

    content: List[ProductOutputDTO]
    total_elements: int
    total_pages: int
    number: int
    size: int
    first: bool
    last: bool
