from django.apps import AppConfig


class ProductsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.products"
    label = "products"

    def ready(self) -> None:
        from rest_framework import status

        from modules.core.exceptions import VALIDATION_ERROR, register_error
        from modules.products.exceptions import (
            InsufficientStock,
            InvalidSortParameter,
            ProductNotFound,
        )

        register_error(ProductNotFound, status.HTTP_404_NOT_FOUND, "PRODUCT_NOT_FOUND")
        register_error(
            InsufficientStock, status.HTTP_400_BAD_REQUEST, "INSUFFICIENT_STOCK"
        )
        register_error(
            InvalidSortParameter, status.HTTP_400_BAD_REQUEST, VALIDATION_ERROR
        )
