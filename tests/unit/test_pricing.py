"""Unit tests for order total calculation."""

import pytest
from services.store_service.exceptions import NotFoundError, OutOfStockError
from services.store_service.services.pricing import (
    calculate_shipping,
    calculate_tax,
)


class TestPricingPolicy:
    """Fixed tax and shipping policy."""

    def test_tax_is_eight_percent(self):
        assert calculate_tax(1000) == 80
        assert calculate_tax(625) == 50
        assert calculate_tax(0) == 0

    def test_tax_rounds_to_nearest_unit(self):
        assert calculate_tax(1006) == 80  # 80.48
        assert calculate_tax(1019) == 82  # 81.52
        assert calculate_tax(6) == 0  # 0.48
        assert calculate_tax(7) == 1  # 0.56

    def test_shipping_boundary_is_strict(self):
        assert calculate_shipping(4999) == 500
        assert calculate_shipping(5000) == 500
        assert calculate_shipping(5001) == 0


@pytest.mark.asyncio
@pytest.mark.unit
async def test_calculate_order_total(shop, make_product):
    a = await make_product(price=1000, stock=5)
    b = await make_product(price=250, stock=5)

    calc = await shop.calculate_order_total(
        [
            {"productId": a.id, "quantity": 2},
            {"productId": b.id, "quantity": 4},
        ]
    )

    assert calc.subtotal == 3000
    assert calc.tax == 240
    assert calc.shipping == 500
    assert calc.total == calc.subtotal + calc.tax + calc.shipping == 3740
    assert [line.line_total for line in calc.items] == [2000, 1000]
    assert all(line.in_stock for line in calc.items)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_free_shipping_above_threshold(shop, make_product):
    product = await make_product(price=5001, stock=1)

    calc = await shop.calculate_order_total([{"productId": product.id, "quantity": 1}])

    assert calc.shipping == 0
    assert calc.tax == 400  # 400.08
    assert calc.total == 5401


@pytest.mark.asyncio
@pytest.mark.unit
async def test_out_of_stock_names_every_product(shop, make_product):
    """The whole calculation fails and lists each short product."""
    a = await make_product(name="Goggles", stock=1)
    b = await make_product(name="Cap", stock=10)
    c = await make_product(name="Fins", stock=0)

    with pytest.raises(OutOfStockError) as exc_info:
        await shop.calculate_order_total(
            [
                {"productId": a.id, "quantity": 2},
                {"productId": b.id, "quantity": 1},
                {"productId": c.id, "quantity": 1},
            ]
        )

    assert exc_info.value.product_names == ["Goggles", "Fins"]
    assert "Goggles, Fins" in str(exc_info.value)


@pytest.mark.asyncio
@pytest.mark.unit
async def test_missing_product_fails(shop):
    with pytest.raises(NotFoundError):
        await shop.calculate_order_total([{"productId": "nope", "quantity": 1}])
