"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.  The API
layer does not catch them: ``ProductsConfig.ready`` registers each class in
the core error table, and the DRF exception handler renders them.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """No product matches the external id (or none that is active, where required)."""


class InsufficientStock(Exception):
    """A stock reduction asked for more units than are available."""

    def __init__(self, available: int, requested: int) -> None:
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock. Available: {available}, Requested: {requested}"
        )


class InvalidSortParameter(ValueError):
    """The requested sort field or direction is not supported."""
