"""Errors raised by the store core.

Every error reaches the immediate caller; nothing here retries.
"""

from typing import Iterable


class StoreError(Exception):
    """Base class for store errors."""


class NotFoundError(StoreError):
    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class InsufficientStockError(StoreError):
    """A decrement would take stock below zero."""

    def __init__(self, product_id: str, available: int, requested: int):
        self.product_id = product_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Available: {available}, requested: {requested}"
        )


class OutOfStockError(StoreError):
    """One or more order lines cannot be satisfied."""

    def __init__(self, product_names: Iterable[str]):
        self.product_names = list(product_names)
        super().__init__(f"Items out of stock: {', '.join(self.product_names)}")


class EmptyCartError(StoreError):
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__("Cart is empty")


class InvalidStatusTransitionError(StoreError):
    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move order from {current} to {target}")


class StockConflictError(StoreError):
    """Stock kept changing underneath a conditional update."""

    def __init__(self, product_id: str, attempts: int):
        self.product_id = product_id
        self.attempts = attempts
        super().__init__(
            f"Stock for product {product_id} changed concurrently "
            f"({attempts} attempts)"
        )
