"""Product DRF serializers for API output.

The serializers operate at the Interface layer: they render the DTOs
returned by the Service Layer into the wire format (camelCase identifiers,
``price`` as a JSON number) and describe that format to drf-spectacular.
Input validation lives in the Pydantic DTOs (``dtos.py``).
"""

from __future__ import annotations

from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    """Read-only rendering of a ``ProductOutputDTO``."""

    productUuid = serializers.CharField(source="external_id", read_only=True)
    title = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True, allow_null=True)
    price = serializers.DecimalField(
        max_digits=7, decimal_places=2, coerce_to_string=False, read_only=True
    )
    storeId = serializers.CharField(source="store_id", read_only=True)
    category = serializers.CharField(read_only=True)
    stock = serializers.IntegerField(read_only=True)
    active = serializers.BooleanField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class ProductPageSerializer(serializers.Serializer):
    """Read-only rendering of a ``ProductPageDTO``."""

    content = ProductSerializer(many=True, read_only=True)
    totalElements = serializers.IntegerField(source="total_elements", read_only=True)
    totalPages = serializers.IntegerField(source="total_pages", read_only=True)
    number = serializers.IntegerField(read_only=True)
    size = serializers.IntegerField(read_only=True)
    first = serializers.BooleanField(read_only=True)
    last = serializers.BooleanField(read_only=True)


class StoreCountSerializer(serializers.Serializer):
    storeId = serializers.CharField(read_only=True)
    count = serializers.IntegerField(read_only=True)
