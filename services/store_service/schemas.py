"""Pydantic schemas for store records and results."""

from datetime import datetime
from typing import Any, Optional

from libs.common.models import WireModel
from pydantic import ConfigDict, Field, model_validator
from services.store_service.models import InventoryOperation, OrderStatus

# ============================================================================
# ADDRESS
# ============================================================================


class Address(WireModel):
    line1: str = Field(..., min_length=1)
    line2: Optional[str] = None
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)


# ============================================================================
# PRODUCT SCHEMAS
# ============================================================================


class ProductCreate(WireModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=100)
    price: int = Field(..., ge=0)  # minor units
    currency: str = Field(default="usd", min_length=3, max_length=8)
    images: list[str] = Field(default_factory=list)
    stock: int = Field(0, ge=0)
    is_active: bool = True
    category: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class ProductUpdate(WireModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    sku: Optional[str] = Field(None, max_length=100)
    price: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=8)
    images: Optional[list[str]] = None
    stock: Optional[int] = None
    is_active: Optional[bool] = None
    category: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None


class Product(WireModel):
    id: str
    name: str
    description: Optional[str] = None
    sku: Optional[str] = None
    price: int
    currency: str
    images: list[str] = Field(default_factory=list)
    # No floor here: an explicit inventory "set" may store any value.
    stock: int
    is_active: bool = True
    category: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime


class ProductPage(WireModel):
    products: list[Product]
    total: int


# ============================================================================
# INVENTORY SCHEMAS
# ============================================================================


class InventoryUpdate(WireModel):
    product_id: str
    quantity: int
    operation: InventoryOperation


# ============================================================================
# CART SCHEMAS
# ============================================================================


class CartItem(WireModel):
    product_id: str
    quantity: int = Field(..., ge=1)


class CartItemWithProduct(CartItem):
    product: Product
    line_total: int


# ============================================================================
# ORDER CALCULATION SCHEMAS
# ============================================================================


class CalculatedItem(WireModel):
    product_id: str
    name: str
    price: int
    quantity: int
    line_total: int
    in_stock: bool


class OrderCalculation(WireModel):
    subtotal: int
    tax: int
    shipping: int
    total: int
    items: list[CalculatedItem]


# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItem(WireModel):
    """Snapshot of a product line at order time. Never updated afterwards."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    name: str
    quantity: int = Field(..., ge=1)
    price: int = Field(..., ge=0)

    @property
    def line_total(self) -> int:
        return self.price * self.quantity


class CreateOrderInput(WireModel):
    user_id: str = Field(..., min_length=1)
    items: list[CartItem] = Field(..., min_length=1)
    shipping_address: Address
    billing_address: Optional[Address] = None
    payment_method_id: Optional[str] = None
    notes: Optional[str] = None


class Order(WireModel):
    id: str
    user_id: str
    status: OrderStatus = OrderStatus.PENDING
    items: list[OrderItem] = Field(default_factory=list)
    subtotal: int
    tax: int
    shipping: int
    total: int
    shipping_address: Address
    billing_address: Optional[Address] = None
    payment_method_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def check_total(self) -> "Order":
        if self.total != self.subtotal + self.tax + self.shipping:
            raise ValueError(
                f"Order total {self.total} != subtotal {self.subtotal} "
                f"+ tax {self.tax} + shipping {self.shipping}"
            )
        return self


class OrderPage(WireModel):
    orders: list[Order]
    total: int


# ============================================================================
# ANALYTICS SCHEMAS
# ============================================================================


class PeriodWindow(WireModel):
    start: datetime
    end: datetime


class Trend(WireModel):
    revenue: float = 0.0  # percent change vs previous window
    orders: float = 0.0


class RevenueStats(WireModel):
    total_revenue: int = 0
    total_orders: int = 0
    average_order_value: float = 0.0
    period: PeriodWindow
    trend: Trend = Field(default_factory=Trend)


class ProductStats(WireModel):
    product_id: str
    name: str
    total_sold: int = 0
    revenue: int = 0


class OrderStats(WireModel):
    pending: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    average_order_value: float = 0.0
