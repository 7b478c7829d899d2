"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Request bodies and query strings are validated by the Pydantic DTOs;
domain exceptions and validation errors propagate to the project-wide
exception handler (``modules.core.exceptions``), which renders them.
"""

from __future__ import annotations

from typing import Any, Dict

from django.conf import settings
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import (
    CreateProductDTO,
    PageRequestDTO,
    PriceRangeDTO,
    SearchQueryDTO,
    StockQuantityDTO,
    StockReductionDTO,
    StockThresholdDTO,
    UpdateProductDTO,
)
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import (
    ProductPageSerializer,
    ProductSerializer,
    StoreCountSerializer,
)
from modules.products.services import ProductService

_PAGE_PARAMETERS = [
    OpenApiParameter("page", OpenApiTypes.INT, description="Page number (0-based)"),
    OpenApiParameter("size", OpenApiTypes.INT, description="Page size"),
]
_QUANTITY_PARAMETER = OpenApiParameter(
    "quantity", OpenApiTypes.INT, required=True, description="Number of units"
)


def _query(request: Request, *names: str) -> Dict[str, Any]:
    """The subset of ``names`` present in the query string."""
    params = request.query_params
    return {name: params[name] for name in names if name in params}


@extend_schema(tags=["Product Management"])
class ProductViewSet(GenericViewSet):
    """ViewSet for Product CRUD and stock operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Product.objects.all()
    serializer_class = ProductSerializer
    lookup_field = "external_id"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(
        summary="Get all products with pagination",
        parameters=[
            *_PAGE_PARAMETERS,
            OpenApiParameter("sortBy", OpenApiTypes.STR, description="Sort field"),
            OpenApiParameter(
                "sortDirection", OpenApiTypes.STR, enum=["asc", "desc"]
            ),
        ],
        responses=ProductPageSerializer,
    )
    def list(self, request: Request) -> Response:
        """GET /api/v1/products"""
        params = _query(request, "page", "size", "sortBy", "sortDirection")
        params.setdefault("size", settings.PRODUCT_DEFAULT_PAGE_SIZE)
        page_request = PageRequestDTO.model_validate(params)

        page = self._service.list_products(
            page_request.page,
            page_request.size,
            page_request.sort_by,
            page_request.sort_direction,
        )
        return Response(ProductPageSerializer(page).data)

    @extend_schema(
        summary="Get product by UUID",
        responses={200: ProductSerializer, 404: OpenApiResponse(description="Product not found")},
    )
    def retrieve(self, request: Request, external_id: str | None = None) -> Response:
        """GET /api/v1/products/{external_id}"""
        product = self._service.get_product(external_id)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    @extend_schema(
        summary="Create a new product",
        request=CreateProductDTO,
        responses={201: ProductSerializer, 400: OpenApiResponse(description="Invalid input data")},
    )
    def create(self, request: Request) -> Response:
        """POST /api/v1/products"""
        dto = CreateProductDTO.model_validate(request.data)
        product = self._service.create_product(dto)
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        summary="Update product",
        request=UpdateProductDTO,
        responses={200: ProductSerializer, 404: OpenApiResponse(description="Product not found")},
    )
    def update(self, request: Request, external_id: str | None = None) -> Response:
        """PUT /api/v1/products/{external_id}"""
        dto = UpdateProductDTO.model_validate(request.data)
        product = self._service.update_product(external_id, dto)
        return Response(ProductSerializer(product).data)

    @extend_schema(exclude=True)
    def partial_update(
        self, request: Request, external_id: str | None = None
    ) -> Response:
        """PATCH /api/v1/products/{external_id}"""
        return self.update(request, external_id)

    @extend_schema(
        summary="Delete product (soft delete)",
        responses={204: None, 404: OpenApiResponse(description="Product not found")},
    )
    def destroy(self, request: Request, external_id: str | None = None) -> Response:
        """DELETE /api/v1/products/{external_id}"""
        self._service.delete_product(external_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    @extend_schema(
        summary="Update product stock",
        request=None,
        parameters=[_QUANTITY_PARAMETER],
        responses={200: None},
    )
    @action(detail=True, methods=["post"], url_path="stock", url_name="stock")
    def update_stock(
        self, request: Request, external_id: str | None = None
    ) -> Response:
        """POST /api/v1/products/{external_id}/stock?quantity=N"""
        dto = StockQuantityDTO.model_validate(_query(request, "quantity"))
        self._service.update_stock(external_id, dto.quantity)
        return Response(status=status.HTTP_200_OK)

    @extend_schema(
        summary="Reduce product stock",
        request=None,
        parameters=[_QUANTITY_PARAMETER],
        responses={200: None},
    )
    @action(
        detail=True,
        methods=["post"],
        url_path="stock/reduce",
        url_name="stock-reduce",
    )
    def reduce_stock(
        self, request: Request, external_id: str | None = None
    ) -> Response:
        """POST /api/v1/products/{external_id}/stock/reduce?quantity=N"""
        dto = StockReductionDTO.model_validate(_query(request, "quantity"))
        self._service.reduce_stock(external_id, dto.quantity)
        return Response(status=status.HTTP_200_OK)

    # ------------------------------------------------------------------
    # Active-only queries
    # ------------------------------------------------------------------

    @extend_schema(summary="Get products by store", responses=ProductSerializer(many=True))
    @action(
        detail=False,
        methods=["get"],
        url_path=r"store/(?P<store_id>[^/.]+)",
        url_name="by-store",
    )
    def by_store(self, request: Request, store_id: str | None = None) -> Response:
        """GET /api/v1/products/store/{store_id}"""
        products = self._service.get_products_by_store(store_id)
        return Response(ProductSerializer(products, many=True).data)

    @extend_schema(summary="Count products of a store", responses=StoreCountSerializer)
    @action(
        detail=False,
        methods=["get"],
        url_path=r"store/(?P<store_id>[^/.]+)/count",
        url_name="store-count",
    )
    def store_count(self, request: Request, store_id: str | None = None) -> Response:
        """GET /api/v1/products/store/{store_id}/count"""
        count = self._service.get_product_count_by_store(store_id)
        return Response(StoreCountSerializer({"storeId": store_id, "count": count}).data)

    @extend_schema(
        summary="Get products by category",
        parameters=_PAGE_PARAMETERS,
        responses=ProductPageSerializer,
    )
    @action(
        detail=False,
        methods=["get"],
        url_path=r"category/(?P<category>[^/]+)",
        url_name="by-category",
    )
    def by_category(self, request: Request, category: str | None = None) -> Response:
        """GET /api/v1/products/category/{category}"""
        params = _query(request, "page", "size")
        params.setdefault("size", settings.PRODUCT_DEFAULT_PAGE_SIZE)
        page_request = PageRequestDTO.model_validate(params)

        page = self._service.get_products_by_category(
            category, page_request.page, page_request.size
        )
        return Response(ProductPageSerializer(page).data)

    @extend_schema(
        summary="Search products by title",
        parameters=[OpenApiParameter("title", OpenApiTypes.STR, required=True)],
        responses=ProductSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path="search", url_name="search")
    def search(self, request: Request) -> Response:
        """GET /api/v1/products/search?title=..."""
        query = SearchQueryDTO.model_validate(_query(request, "title"))
        products = self._service.search_products(query.title)
        return Response(ProductSerializer(products, many=True).data)

    @extend_schema(
        summary="Get products by price range",
        parameters=[
            OpenApiParameter("minPrice", OpenApiTypes.DECIMAL, required=True),
            OpenApiParameter("maxPrice", OpenApiTypes.DECIMAL, required=True),
        ],
        responses=ProductSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path="price-range", url_name="price-range")
    def price_range(self, request: Request) -> Response:
        """GET /api/v1/products/price-range?minPrice=..&maxPrice=.."""
        bounds = PriceRangeDTO.model_validate(_query(request, "minPrice", "maxPrice"))
        products = self._service.get_products_by_price_range(
            bounds.min_price, bounds.max_price
        )
        return Response(ProductSerializer(products, many=True).data)

    @extend_schema(
        summary="Get low stock products",
        parameters=[OpenApiParameter("threshold", OpenApiTypes.INT)],
        responses=ProductSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path="low-stock", url_name="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/v1/products/low-stock?threshold=N"""
        params = _query(request, "threshold")
        params.setdefault("threshold", settings.PRODUCT_LOW_STOCK_THRESHOLD)
        query = StockThresholdDTO.model_validate(params)

        products = self._service.get_low_stock_products(query.threshold)
        return Response(ProductSerializer(products, many=True).data)
