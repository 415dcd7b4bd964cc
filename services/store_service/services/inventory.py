"""Inventory ledger: per-product stock with a hard floor at zero.

Increments and decrements are written with a conditional update on the stock
value that was read, so a concurrent writer cannot slip between the floor
check and the write. ``set`` overwrites unconditionally and enforces no floor.
"""

from typing import Iterable, Optional, Union

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.database_service.base import RecordStore
from services.store_service.exceptions import (
    InsufficientStockError,
    StockConflictError,
)
from services.store_service.models import PRODUCTS, InventoryOperation
from services.store_service.schemas import InventoryUpdate, Product
from services.store_service.services.catalog import require_product

logger = get_logger(__name__)

MAX_STOCK_UPDATE_ATTEMPTS = 3
DEFAULT_LOW_STOCK_THRESHOLD = 10


def _next_stock(product: Product, quantity: int, operation: InventoryOperation) -> int:
    if operation == InventoryOperation.SET:
        return quantity
    if operation == InventoryOperation.INCREMENT:
        return product.stock + quantity
    new_stock = product.stock - quantity
    if new_stock < 0:
        raise InsufficientStockError(product.id, product.stock, quantity)
    return new_stock


async def update_inventory(
    store: RecordStore,
    product_id: str,
    quantity: int,
    operation: Union[InventoryOperation, str],
) -> Product:
    """Set, increment or decrement a product's stock.

    Raises:
        NotFoundError: the product does not exist.
        InsufficientStockError: a decrement would go below zero. Nothing is written.
        StockConflictError: stock kept changing concurrently.
        ValueError: negative quantity for increment/decrement.
    """
    operation = InventoryOperation(operation)
    if operation != InventoryOperation.SET and quantity < 0:
        raise ValueError(f"{operation.value} quantity must be >= 0, got {quantity}")

    for attempt in range(1, MAX_STOCK_UPDATE_ATTEMPTS + 1):
        product = await require_product(store, product_id)
        new_stock = _next_stock(product, quantity, operation)
        changes = {"stock": new_stock, "updated_at": utc_now().isoformat()}

        if operation == InventoryOperation.SET:
            record = await store.update(PRODUCTS, product_id, changes)
        else:
            record = await store.update_if(
                PRODUCTS, product_id, {"stock": product.stock}, changes
            )

        if record is not None:
            logger.info(
                "Inventory %s product=%s qty=%d stock %d -> %d",
                operation.value,
                product_id,
                quantity,
                product.stock,
                new_stock,
            )
            return Product.model_validate(record)

        logger.warning(
            "Stock for product %s changed during %s (attempt %d/%d)",
            product_id,
            operation.value,
            attempt,
            MAX_STOCK_UPDATE_ATTEMPTS,
        )

    raise StockConflictError(product_id, MAX_STOCK_UPDATE_ATTEMPTS)


async def bulk_update_inventory(
    store: RecordStore,
    updates: Iterable[Union[InventoryUpdate, dict]],
    applied: Optional[list[InventoryUpdate]] = None,
) -> list[Product]:
    """Apply inventory updates one after another, in the given order.

    Not transactional: the first failure propagates and leaves earlier
    updates in place. Pass ``applied`` to learn which updates went through
    before a failure; each successful update is appended to it.
    """
    results: list[Product] = []
    for update in updates:
        if isinstance(update, dict):
            update = InventoryUpdate.model_validate(update)
        product = await update_inventory(
            store, update.product_id, update.quantity, update.operation
        )
        results.append(product)
        if applied is not None:
            applied.append(update)
    return results


async def get_low_stock_products(
    store: RecordStore, threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
) -> list[Product]:
    """Active products whose stock is at or below ``threshold``."""
    records = await store.query(PRODUCTS, where={"isActive": True})
    products = [Product.model_validate(r) for r in records]
    return [p for p in products if p.stock <= threshold]
