"""Order lifecycle: create, checkout, read, status changes and cancellation.

Order creation is a sequence of independent writes:
    1. price the lines (may fail: missing product / out of stock)
    2. insert the order with status ``pending``
    3. insert one ``order_items`` row per line
    4. decrement inventory line by line

Steps 2-4 are not atomic. If step 4 fails partway, the decrements already
applied are reversed and the order is voided (status ``cancelled`` with a
note) before the original error is re-raised, so the failed attempt stays on
record and can be reconciled.
"""

import uuid
from typing import Optional, Union

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.database_service.base import RecordStore
from services.store_service.exceptions import (
    EmptyCartError,
    InvalidStatusTransitionError,
    NotFoundError,
)
from services.store_service.models import (
    ORDER_ITEMS,
    ORDERS,
    InventoryOperation,
    OrderSortField,
    OrderStatus,
)
from services.store_service.schemas import (
    Address,
    CreateOrderInput,
    InventoryUpdate,
    Order,
    OrderItem,
    OrderPage,
)
from services.store_service.services.cart import clear_cart, get_cart
from services.store_service.services.inventory import (
    bulk_update_inventory,
    update_inventory,
)
from services.store_service.services.pricing import calculate_order_total

logger = get_logger(__name__)

VOIDED_ORDER_NOTE = "Voided: inventory could not be reserved"

# Allowed status moves. Currently permissive (any status to any other); this
# table is the one place to tighten the policy.
ORDER_STATUS_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(OrderStatus),
    OrderStatus.PROCESSING: frozenset(OrderStatus),
    OrderStatus.SHIPPED: frozenset(OrderStatus),
    OrderStatus.DELIVERED: frozenset(OrderStatus),
    OrderStatus.CANCELLED: frozenset(OrderStatus),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ORDER_STATUS_TRANSITIONS.get(current, frozenset())


# ============================================================================
# CREATE
# ============================================================================


async def create_order(
    store: RecordStore, order_in: Union[CreateOrderInput, dict]
) -> Order:
    """Create an order from explicit lines and take the stock for it."""
    if isinstance(order_in, dict):
        order_in = CreateOrderInput.model_validate(order_in)

    calculation = await calculate_order_total(store, order_in.items)

    order_items = [
        OrderItem(
            product_id=line.product_id,
            name=line.name,
            quantity=line.quantity,
            price=line.price,
        )
        for line in calculation.items
    ]

    now = utc_now()
    order = Order(
        id=str(uuid.uuid4()),
        user_id=order_in.user_id,
        status=OrderStatus.PENDING,
        items=order_items,
        subtotal=calculation.subtotal,
        tax=calculation.tax,
        shipping=calculation.shipping,
        total=calculation.total,
        shipping_address=order_in.shipping_address,
        billing_address=order_in.billing_address,
        payment_method_id=order_in.payment_method_id,
        notes=order_in.notes,
        created_at=now,
        updated_at=now,
    )
    await store.insert(ORDERS, order.to_record())

    for item in order_items:
        await store.insert(
            ORDER_ITEMS,
            {
                "id": str(uuid.uuid4()),
                "orderId": order.id,
                **item.to_record(),
                "lineTotal": item.line_total,
                "created_at": now.isoformat(),
            },
        )

    decrements = [
        InventoryUpdate(
            product_id=item.product_id,
            quantity=item.quantity,
            operation=InventoryOperation.DECREMENT,
        )
        for item in order_in.items
    ]
    applied: list[InventoryUpdate] = []
    try:
        await bulk_update_inventory(store, decrements, applied=applied)
    except Exception:
        logger.error(
            "Inventory decrement failed for order %s after %d/%d lines",
            order.id,
            len(applied),
            len(decrements),
        )
        await _void_order(store, order, applied)
        raise

    logger.info(
        "Created order %s user=%s total=%d items=%d",
        order.id,
        order.user_id,
        order.total,
        len(order_items),
    )
    return order


async def _void_order(
    store: RecordStore, order: Order, applied: list[InventoryUpdate]
) -> None:
    """Reverse applied decrements and mark the order cancelled.

    Compensation failures are logged; the caller re-raises the original error.
    """
    for update in reversed(applied):
        try:
            await update_inventory(
                store,
                update.product_id,
                update.quantity,
                InventoryOperation.INCREMENT,
            )
        except Exception:
            logger.exception(
                "Could not restore %d units of product %s for voided order %s",
                update.quantity,
                update.product_id,
                order.id,
            )

    note = VOIDED_ORDER_NOTE
    if order.notes:
        note = f"{order.notes}\n{VOIDED_ORDER_NOTE}"
    try:
        await store.update(
            ORDERS,
            order.id,
            {
                "status": OrderStatus.CANCELLED.value,
                "notes": note,
                "updated_at": utc_now().isoformat(),
            },
        )
    except Exception:
        logger.exception("Could not void order %s", order.id)


# ============================================================================
# READ
# ============================================================================


async def _load_items(store: RecordStore, order_id: str) -> list[OrderItem]:
    rows = await store.query(ORDER_ITEMS, where={"orderId": order_id})
    return [
        OrderItem(
            product_id=row["productId"],
            name=row["name"],
            quantity=row["quantity"],
            price=row["price"],
        )
        for row in rows
    ]


async def _hydrate(store: RecordStore, record: dict) -> Order:
    # order_items is the source of truth for lines, not the embedded copy
    items = await _load_items(store, record["id"])
    return Order.model_validate({**record, "items": [i.to_record() for i in items]})


async def get_order(store: RecordStore, order_id: str) -> Optional[Order]:
    record = await store.get(ORDERS, order_id)
    if record is None:
        return None
    return await _hydrate(store, record)


async def list_orders(
    store: RecordStore,
    *,
    user_id: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    sort_by: OrderSortField = OrderSortField.CREATED_AT,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> OrderPage:
    """Orders newest (or largest) first, each re-hydrated from order_items."""
    where: dict = {}
    if user_id:
        where["userId"] = user_id
    if status:
        where["status"] = OrderStatus(status).value

    records = await store.query(
        ORDERS,
        where=where,
        order_by=OrderSortField(sort_by).value,
        order_direction="desc",
        limit=limit,
        offset=offset,
    )
    orders = [await _hydrate(store, record) for record in records]
    total = await store.count(ORDERS, where)
    return OrderPage(orders=orders, total=total)


# ============================================================================
# STATUS
# ============================================================================


async def update_order_status(
    store: RecordStore, order_id: str, status: Union[OrderStatus, str]
) -> Order:
    status = OrderStatus(status)
    order = await get_order(store, order_id)
    if order is None:
        raise NotFoundError("Order", order_id)

    if not can_transition(order.status, status):
        raise InvalidStatusTransitionError(order.status.value, status.value)

    now = utc_now()
    await store.update(
        ORDERS, order_id, {"status": status.value, "updated_at": now.isoformat()}
    )
    logger.info("Order %s status %s -> %s", order_id, order.status.value, status.value)
    return order.model_copy(update={"status": status, "updated_at": now})


async def cancel_order(
    store: RecordStore, order_id: str, restore_inventory: bool = True
) -> Order:
    """Cancel an order, putting its stock back by default.

    Cancelling an already-cancelled order is a no-op.
    """
    order = await get_order(store, order_id)
    if order is None:
        raise NotFoundError("Order", order_id)

    if order.status == OrderStatus.CANCELLED:
        return order

    if restore_inventory and order.items:
        await bulk_update_inventory(
            store,
            [
                InventoryUpdate(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    operation=InventoryOperation.INCREMENT,
                )
                for item in order.items
            ],
        )

    return await update_order_status(store, order_id, OrderStatus.CANCELLED)


# ============================================================================
# CHECKOUT
# ============================================================================


async def checkout(
    store: RecordStore,
    user_id: str,
    shipping_address: Union[Address, dict],
    payment_method_id: Optional[str] = None,
    *,
    billing_address: Optional[Union[Address, dict]] = None,
    notes: Optional[str] = None,
) -> Order:
    """Turn the user's cart into an order, then empty the cart.

    The cart is only cleared after the order is created.
    """
    cart = await get_cart(store, user_id)
    if not cart:
        raise EmptyCartError(user_id)

    order = await create_order(
        store,
        CreateOrderInput(
            user_id=user_id,
            items=cart,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method_id=payment_method_id,
            notes=notes,
        ),
    )
    await clear_cart(store, user_id)
    return order
