"""Order total calculation.

Fixed policy, all amounts in minor units:
    tax      = round(subtotal * 8%)
    shipping = 0 when subtotal > 5000, else 500
    total    = subtotal + tax + shipping
"""

from decimal import Decimal
from typing import Iterable, Union

from libs.common.currency import apply_rate
from services.database_service.base import RecordStore
from services.store_service.exceptions import OutOfStockError
from services.store_service.schemas import CalculatedItem, CartItem, OrderCalculation
from services.store_service.services.catalog import require_product

TAX_RATE = Decimal("0.08")
FREE_SHIPPING_THRESHOLD = 5000  # strictly above this ships free
FLAT_SHIPPING_FEE = 500


def calculate_tax(subtotal: int) -> int:
    return apply_rate(subtotal, TAX_RATE)


def calculate_shipping(subtotal: int) -> int:
    return 0 if subtotal > FREE_SHIPPING_THRESHOLD else FLAT_SHIPPING_FEE


async def calculate_order_total(
    store: RecordStore, items: Iterable[Union[CartItem, dict]]
) -> OrderCalculation:
    """Price every line against current product state.

    Raises:
        NotFoundError: a line references a missing product.
        OutOfStockError: any line asks for more than is in stock. Names every
            such product; no partial totals are returned.
    """
    calculated: list[CalculatedItem] = []
    subtotal = 0

    for item in items:
        if isinstance(item, dict):
            item = CartItem.model_validate(item)
        product = await require_product(store, item.product_id)
        line_total = product.price * item.quantity
        calculated.append(
            CalculatedItem(
                product_id=item.product_id,
                name=product.name,
                price=product.price,
                quantity=item.quantity,
                line_total=line_total,
                in_stock=product.stock >= item.quantity,
            )
        )
        subtotal += line_total

    out_of_stock = [line.name for line in calculated if not line.in_stock]
    if out_of_stock:
        raise OutOfStockError(out_of_stock)

    tax = calculate_tax(subtotal)
    shipping = calculate_shipping(subtotal)
    return OrderCalculation(
        subtotal=subtotal,
        tax=tax,
        shipping=shipping,
        total=subtotal + tax + shipping,
        items=calculated,
    )
