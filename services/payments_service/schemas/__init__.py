"""Payments Service schemas package."""

from services.payments_service.schemas.enums import BasePlan, TransactionStatus
from services.payments_service.schemas.main import (
    CheckoutOptions,
    CheckoutSession,
    ConnectStatus,
    MonthlyTransactionStats,
    RefundOptions,
    Transaction,
    TransactionStats,
)

__all__ = [
    "BasePlan",
    "CheckoutOptions",
    "CheckoutSession",
    "ConnectStatus",
    "MonthlyTransactionStats",
    "RefundOptions",
    "Transaction",
    "TransactionStats",
    "TransactionStatus",
]
