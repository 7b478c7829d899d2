"""Product domain constants.

Field limits shared by the model validators and the input DTOs, plus the
whitelist of columns the paginated listing may be sorted by.
"""

from decimal import Decimal

TITLE_MIN_LENGTH = 2
TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 1000

MIN_PRICE = Decimal("0.01")
MAX_PRICE = Decimal("99999.99")

MAX_STOCK = 10000

STORE_ID_PATTERN = r"^[A-Z0-9-]+\Z"

# Wire name -> model column.  Column names are accepted as-is too.
SORTABLE_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "price": "price",
    "stock": "stock",
    "storeId": "store_id",
    "category": "category",
    "productUuid": "external_id",
}

SORT_DIRECTIONS = ("asc", "desc")

DEFAULT_SORT_FIELD = "createdAt"
DEFAULT_SORT_DIRECTION = "desc"

CACHE_KEY_PREFIX = "products"

# Integer query parameters are 32-bit signed on the wire.
MAX_INT_PARAMETER = 2**31 - 1
