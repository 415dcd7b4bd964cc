"""Store Service models package."""

from services.store_service.models.collections import (
    CARTS,
    ORDER_ITEMS,
    ORDERS,
    PRODUCTS,
)
from services.store_service.models.enums import (
    InventoryOperation,
    OrderSortField,
    OrderStatus,
    ProductSortField,
    StatsPeriod,
)

__all__ = [
    "CARTS",
    "InventoryOperation",
    "ORDERS",
    "ORDER_ITEMS",
    "OrderSortField",
    "OrderStatus",
    "PRODUCTS",
    "ProductSortField",
    "StatsPeriod",
]
