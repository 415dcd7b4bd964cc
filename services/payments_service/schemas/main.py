from typing import Optional

from libs.common.models import WireModel
from pydantic import EmailStr, Field
from services.payments_service.schemas.enums import TransactionStatus


class CheckoutOptions(WireModel):
    amount: int = Field(..., gt=0)  # minor units, e.g. 1999 = $19.99
    currency: str = Field(default="usd", min_length=3, max_length=8)
    user_id: Optional[str] = None
    user_email: Optional[EmailStr] = None
    description: Optional[str] = None
    metadata: Optional[dict[str, str]] = None
    success_url: str
    cancel_url: str


class CheckoutSession(WireModel):
    id: str
    url: str
    amount: int
    currency: str
    status: str


class Transaction(WireModel):
    id: str
    amount: int
    vlibe_fee: int = 0
    net_amount: int = 0
    currency: str
    status: TransactionStatus
    stripe_id: Optional[str] = None
    user_id: Optional[str] = None
    metadata: Optional[dict[str, str]] = None
    created_at: str = Field(..., alias="createdAt")


class RefundOptions(WireModel):
    transaction_id: str
    amount: Optional[int] = Field(None, gt=0)  # partial refund, minor units
    reason: Optional[str] = None


class ConnectStatus(WireModel):
    connected: bool = False
    account_id: Optional[str] = None
    charges_enabled: Optional[bool] = None
    payouts_enabled: Optional[bool] = None


class MonthlyTransactionStats(WireModel):
    revenue: int = 0
    fees: int = 0
    net: int = 0
    count: int = 0


class TransactionStats(WireModel):
    total_revenue: int = 0
    total_fees: int = 0
    net_revenue: int = 0
    transaction_count: int = 0
    this_month: MonthlyTransactionStats = Field(default_factory=MonthlyTransactionStats)
