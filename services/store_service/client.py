"""E-commerce facade over a Record Store.

Binds the store operations to one ``RecordStore`` so application code can
hold a single object::

    store = DatabaseClient(project_id="...", database_token="...")
    shop = EcommerceClient(store)
    await shop.add_to_cart("user-1", {"productId": "p-1", "quantity": 2})
    order = await shop.checkout("user-1", shipping_address)
"""

from datetime import datetime
from typing import Iterable, Optional, Union

from services.database_service.base import RecordStore
from services.store_service.models import (
    InventoryOperation,
    OrderSortField,
    OrderStatus,
    ProductSortField,
    StatsPeriod,
)
from services.store_service.schemas import (
    Address,
    CartItem,
    CartItemWithProduct,
    CreateOrderInput,
    InventoryUpdate,
    Order,
    OrderCalculation,
    OrderPage,
    OrderStats,
    Product,
    ProductCreate,
    ProductPage,
    ProductStats,
    ProductUpdate,
    RevenueStats,
)
from services.store_service.services import cart, catalog, inventory, orders, pricing
from services.store_service.services.analytics import (
    FullScanOrderAnalytics,
    OrderAnalytics,
)


class EcommerceClient:
    """Products, inventory, carts, orders and analytics for one store."""

    def __init__(self, store: RecordStore, analytics: Optional[OrderAnalytics] = None):
        self.store = store
        self.analytics = analytics or FullScanOrderAnalytics(store)

    # ===========================
    # PRODUCTS & INVENTORY
    # ===========================

    async def create_product(self, product_in: Union[ProductCreate, dict]) -> Product:
        return await catalog.create_product(self.store, product_in)

    async def update_product(
        self, product_id: str, updates: Union[ProductUpdate, dict]
    ) -> Product:
        return await catalog.update_product(self.store, product_id, updates)

    async def get_product(self, product_id: str) -> Optional[Product]:
        return await catalog.get_product(self.store, product_id)

    async def list_products(
        self,
        *,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        sort_by: Optional[ProductSortField] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> ProductPage:
        return await catalog.list_products(
            self.store,
            category=category,
            is_active=is_active,
            sort_by=sort_by,
            limit=limit,
            offset=offset,
        )

    async def delete_product(self, product_id: str) -> None:
        await catalog.delete_product(self.store, product_id)

    async def update_inventory(
        self,
        product_id: str,
        quantity: int,
        operation: Union[InventoryOperation, str],
    ) -> Product:
        return await inventory.update_inventory(
            self.store, product_id, quantity, operation
        )

    async def bulk_update_inventory(
        self, updates: Iterable[Union[InventoryUpdate, dict]]
    ) -> list[Product]:
        return await inventory.bulk_update_inventory(self.store, updates)

    async def get_low_stock_products(
        self, threshold: int = inventory.DEFAULT_LOW_STOCK_THRESHOLD
    ) -> list[Product]:
        return await inventory.get_low_stock_products(self.store, threshold)

    # ===========================
    # ORDERS & CHECKOUT
    # ===========================

    async def calculate_order_total(
        self, items: Iterable[Union[CartItem, dict]]
    ) -> OrderCalculation:
        return await pricing.calculate_order_total(self.store, items)

    async def create_order(self, order_in: Union[CreateOrderInput, dict]) -> Order:
        return await orders.create_order(self.store, order_in)

    async def get_order(self, order_id: str) -> Optional[Order]:
        return await orders.get_order(self.store, order_id)

    async def list_orders(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
        sort_by: OrderSortField = OrderSortField.CREATED_AT,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> OrderPage:
        return await orders.list_orders(
            self.store,
            user_id=user_id,
            status=status,
            sort_by=sort_by,
            limit=limit,
            offset=offset,
        )

    async def update_order_status(
        self, order_id: str, status: Union[OrderStatus, str]
    ) -> Order:
        return await orders.update_order_status(self.store, order_id, status)

    async def cancel_order(self, order_id: str, restore_inventory: bool = True) -> Order:
        return await orders.cancel_order(self.store, order_id, restore_inventory)

    async def checkout(
        self,
        user_id: str,
        shipping_address: Union[Address, dict],
        payment_method_id: Optional[str] = None,
        *,
        billing_address: Optional[Union[Address, dict]] = None,
        notes: Optional[str] = None,
    ) -> Order:
        return await orders.checkout(
            self.store,
            user_id,
            shipping_address,
            payment_method_id,
            billing_address=billing_address,
            notes=notes,
        )

    # ===========================
    # CART OPERATIONS
    # ===========================

    async def add_to_cart(
        self, user_id: str, item: Union[CartItem, dict]
    ) -> list[CartItem]:
        return await cart.add_to_cart(self.store, user_id, item)

    async def update_cart_item(
        self, user_id: str, product_id: str, quantity: int
    ) -> list[CartItem]:
        return await cart.update_cart_item(self.store, user_id, product_id, quantity)

    async def get_cart(self, user_id: str) -> list[CartItem]:
        return await cart.get_cart(self.store, user_id)

    async def get_cart_with_details(self, user_id: str) -> list[CartItemWithProduct]:
        return await cart.get_cart_with_details(self.store, user_id)

    async def clear_cart(self, user_id: str) -> None:
        await cart.clear_cart(self.store, user_id)

    # ===========================
    # ANALYTICS
    # ===========================

    async def get_revenue_stats(
        self, period: Union[StatsPeriod, str], now: Optional[datetime] = None
    ) -> RevenueStats:
        return await self.analytics.get_revenue_stats(period, now=now)

    async def get_top_products(
        self,
        limit: int = 10,
        period: Optional[Union[StatsPeriod, str]] = None,
        now: Optional[datetime] = None,
    ) -> list[ProductStats]:
        return await self.analytics.get_top_products(limit, period, now=now)

    async def get_order_stats(self) -> OrderStats:
        return await self.analytics.get_order_stats()
