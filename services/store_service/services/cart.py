"""Per-user cart: one row per (user, product) in the ``carts`` collection."""

import uuid
from typing import Union

from libs.common.datetime_utils import utc_now
from services.database_service.base import RecordStore
from services.store_service.exceptions import NotFoundError
from services.store_service.models import CARTS
from services.store_service.schemas import CartItem, CartItemWithProduct
from services.store_service.services.catalog import require_product


async def _find_row(store: RecordStore, user_id: str, product_id: str):
    rows = await store.query(CARTS, where={"userId": user_id, "productId": product_id})
    return rows[0] if rows else None


async def get_cart(store: RecordStore, user_id: str) -> list[CartItem]:
    """Raw cart lines without product data."""
    rows = await store.query(CARTS, where={"userId": user_id})
    return [
        CartItem(product_id=row["productId"], quantity=row["quantity"])
        for row in rows
    ]


async def add_to_cart(
    store: RecordStore, user_id: str, item: Union[CartItem, dict]
) -> list[CartItem]:
    """Add a line, accumulating onto an existing row for the same product."""
    if isinstance(item, dict):
        item = CartItem.model_validate(item)

    now = utc_now().isoformat()
    existing = await _find_row(store, user_id, item.product_id)
    if existing:
        await store.update(
            CARTS,
            existing["id"],
            {"quantity": existing["quantity"] + item.quantity, "updated_at": now},
        )
    else:
        await store.insert(
            CARTS,
            {
                "id": str(uuid.uuid4()),
                "userId": user_id,
                "productId": item.product_id,
                "quantity": item.quantity,
                "created_at": now,
                "updated_at": now,
            },
        )

    return await get_cart(store, user_id)


async def update_cart_item(
    store: RecordStore, user_id: str, product_id: str, quantity: int
) -> list[CartItem]:
    """Overwrite a line's quantity; zero removes the row."""
    if quantity < 0:
        raise ValueError(f"Cart quantity must be >= 0, got {quantity}")

    existing = await _find_row(store, user_id, product_id)
    if not existing:
        raise NotFoundError("Cart item", product_id)

    if quantity == 0:
        await store.delete(CARTS, existing["id"])
    else:
        await store.update(
            CARTS,
            existing["id"],
            {"quantity": quantity, "updated_at": utc_now().isoformat()},
        )

    return await get_cart(store, user_id)


async def get_cart_with_details(
    store: RecordStore, user_id: str
) -> list[CartItemWithProduct]:
    """Cart lines joined against current product records."""
    enriched = []
    for item in await get_cart(store, user_id):
        product = await require_product(store, item.product_id)
        enriched.append(
            CartItemWithProduct(
                product_id=item.product_id,
                quantity=item.quantity,
                product=product,
                line_total=product.price * item.quantity,
            )
        )
    return enriched


async def clear_cart(store: RecordStore, user_id: str) -> None:
    """Delete every row for the user, one at a time."""
    rows = await store.query(CARTS, where={"userId": user_id})
    for row in rows:
        await store.delete(CARTS, row["id"])
