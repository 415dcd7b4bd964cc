"""Enum definitions for store records."""

import enum


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class InventoryOperation(str, enum.Enum):
    SET = "set"
    INCREMENT = "increment"
    DECREMENT = "decrement"


class StatsPeriod(str, enum.Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ProductSortField(str, enum.Enum):
    NAME = "name"
    PRICE = "price"
    STOCK = "stock"
    CREATED_AT = "created_at"


class OrderSortField(str, enum.Enum):
    CREATED_AT = "created_at"
    TOTAL = "total"
