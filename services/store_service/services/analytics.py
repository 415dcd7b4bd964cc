"""Order analytics.

``OrderAnalytics`` is the interface callers depend on. The default
``FullScanOrderAnalytics`` reads the whole ``orders`` collection on every
call and keeps no aggregates, so results always reflect current records.
"""

import abc
from datetime import datetime
from typing import Optional, Union

from libs.common.currency import round_half_up
from libs.common.datetime_utils import (
    parse_timestamp,
    period_start,
    previous_period_start,
    utc_now,
)
from services.database_service.base import RecordStore
from services.store_service.models import ORDERS, OrderStatus, StatsPeriod
from services.store_service.schemas import (
    OrderStats,
    PeriodWindow,
    ProductStats,
    RevenueStats,
    Trend,
)

TOP_PRODUCT_PERIODS = frozenset({StatsPeriod.DAY, StatsPeriod.WEEK, StatsPeriod.MONTH})


def _percent_change(current: int, previous: int) -> float:
    # No baseline means no trend
    if previous <= 0:
        return 0.0
    return round_half_up((current - previous) / previous * 100, 2)


class OrderAnalytics(abc.ABC):
    """Revenue, product and status statistics over order history."""

    @abc.abstractmethod
    async def get_revenue_stats(
        self, period: Union[StatsPeriod, str], now: Optional[datetime] = None
    ) -> RevenueStats:
        """Revenue for the current period with a trend against the previous one."""

    @abc.abstractmethod
    async def get_top_products(
        self,
        limit: int = 10,
        period: Optional[Union[StatsPeriod, str]] = None,
        now: Optional[datetime] = None,
    ) -> list[ProductStats]:
        """Best-selling products by revenue, highest first."""

    @abc.abstractmethod
    async def get_order_stats(self) -> OrderStats:
        """Order counts per status and overall average order value."""


class FullScanOrderAnalytics(OrderAnalytics):
    def __init__(self, store: RecordStore):
        self.store = store

    async def _orders(self) -> list[dict]:
        return await self.store.query(ORDERS)

    async def get_revenue_stats(
        self, period: Union[StatsPeriod, str], now: Optional[datetime] = None
    ) -> RevenueStats:
        period = StatsPeriod(period)
        now = now or utc_now()
        start = period_start(now, period.value)
        previous_start = previous_period_start(start, period.value)

        current, previous = [], []
        for order in await self._orders():
            created_at = parse_timestamp(order["created_at"])
            if created_at >= start:
                current.append(order)
            elif created_at >= previous_start:
                previous.append(order)

        total_revenue = sum(order["total"] for order in current)
        previous_revenue = sum(order["total"] for order in previous)
        total_orders = len(current)

        return RevenueStats(
            total_revenue=total_revenue,
            total_orders=total_orders,
            average_order_value=total_revenue / total_orders if total_orders else 0.0,
            period=PeriodWindow(start=start, end=now),
            trend=Trend(
                revenue=_percent_change(total_revenue, previous_revenue),
                orders=_percent_change(total_orders, len(previous)),
            ),
        )

    async def get_top_products(
        self,
        limit: int = 10,
        period: Optional[Union[StatsPeriod, str]] = None,
        now: Optional[datetime] = None,
    ) -> list[ProductStats]:
        orders = await self._orders()

        if period is not None:
            period = StatsPeriod(period)
            if period not in TOP_PRODUCT_PERIODS:
                raise ValueError(
                    f"Unsupported period for top products: {period.value}"
                )
            start = period_start(now or utc_now(), period.value)
            orders = [o for o in orders if parse_timestamp(o["created_at"]) >= start]

        by_product: dict[str, ProductStats] = {}
        for order in orders:
            for item in order.get("items") or []:
                stats = by_product.setdefault(
                    item["productId"],
                    ProductStats(product_id=item["productId"], name=item["name"]),
                )
                stats.total_sold += item["quantity"]
                stats.revenue += item["price"] * item["quantity"]

        ranked = sorted(by_product.values(), key=lambda s: s.revenue, reverse=True)
        return ranked[:limit]

    async def get_order_stats(self) -> OrderStats:
        orders = await self._orders()
        counts = {status.value: 0 for status in OrderStatus}
        total_value = 0
        for order in orders:
            counts[OrderStatus(order["status"]).value] += 1
            total_value += order["total"]

        return OrderStats(
            **counts,
            average_order_value=total_value / len(orders) if orders else 0.0,
        )
