"""Product catalog operations over the Record Store."""

import secrets
import string
import time
import uuid
from typing import Optional, Union

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.database_service.base import RecordStore
from services.store_service.exceptions import NotFoundError
from services.store_service.models import PRODUCTS, ProductSortField
from services.store_service.schemas import (
    Product,
    ProductCreate,
    ProductPage,
    ProductUpdate,
)

logger = get_logger(__name__)

_BASE36_ALPHABET = string.digits + string.ascii_uppercase
SKU_SUFFIX_LENGTH = 4


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_sku() -> str:
    """Return ``<base36 ms timestamp>-<4 random base36 chars>``, uppercased."""
    timestamp = _to_base36(time.time_ns() // 1_000_000)
    suffix = "".join(
        secrets.choice(_BASE36_ALPHABET) for _ in range(SKU_SUFFIX_LENGTH)
    )
    return f"{timestamp}-{suffix}"


async def create_product(
    store: RecordStore, product_in: Union[ProductCreate, dict]
) -> Product:
    """Create a product. A SKU is generated when none is given."""
    if isinstance(product_in, dict):
        product_in = ProductCreate.model_validate(product_in)

    now = utc_now()
    product = Product(
        id=str(uuid.uuid4()),
        **product_in.model_dump(exclude={"sku"}),
        sku=product_in.sku or generate_sku(),
        created_at=now,
        updated_at=now,
    )
    await store.insert(PRODUCTS, product.to_record())
    logger.info("Created product %s sku=%s", product.id, product.sku)
    return product


async def get_product(store: RecordStore, product_id: str) -> Optional[Product]:
    record = await store.get(PRODUCTS, product_id)
    if record is None:
        return None
    return Product.model_validate(record)


async def require_product(store: RecordStore, product_id: str) -> Product:
    """Like get_product() but raises NotFoundError when absent."""
    product = await get_product(store, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


async def update_product(
    store: RecordStore,
    product_id: str,
    updates: Union[ProductUpdate, dict],
) -> Product:
    """Apply a partial update. The product id never changes.

    Only the fields set on ``updates`` are written, so a concurrent stock
    change is never overwritten by a stale read.

    Raises:
        NotFoundError: the product does not exist.
        ValueError: the merged product is invalid. Nothing is written.
    """
    if isinstance(updates, dict):
        updates = ProductUpdate.model_validate(updates)

    existing = await require_product(store, product_id)
    now = utc_now()
    # Validate the merged result before touching the store
    merged = {**existing.model_dump(), **updates.model_dump(exclude_unset=True)}
    Product.model_validate({**merged, "updated_at": now})

    record = {**updates.to_record(exclude_unset=True), "updated_at": now.isoformat()}
    stored = await store.update(PRODUCTS, product_id, record)
    return Product.model_validate(stored)


async def list_products(
    store: RecordStore,
    *,
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
    sort_by: Optional[ProductSortField] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> ProductPage:
    where: dict = {}
    if category:
        where["category"] = category
    if is_active is not None:
        where["isActive"] = is_active

    records = await store.query(
        PRODUCTS,
        where=where,
        order_by=ProductSortField(sort_by).value if sort_by else None,
        order_direction="asc",
        limit=limit,
        offset=offset,
    )
    total = await store.count(PRODUCTS, where)
    return ProductPage(
        products=[Product.model_validate(r) for r in records],
        total=total,
    )


async def delete_product(store: RecordStore, product_id: str) -> None:
    """Soft delete: flip isActive off. Products are never removed."""
    await update_product(store, product_id, ProductUpdate(is_active=False))
    logger.info("Deactivated product %s", product_id)
