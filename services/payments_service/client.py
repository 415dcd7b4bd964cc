"""
Platform payments client (Stripe Connect under the hood).

Provides async methods for:
- Stripe Connect onboarding and status
- Creating and fetching one-time checkout sessions
- Listing transactions and their aggregate stats
- Issuing full or partial refunds

Base apps pay a per-transaction platform fee that depends on their plan.
Server-side only: the app secret must never reach a browser.
"""

from typing import Optional, Union

import httpx
from libs.common.config import get_settings
from libs.common.currency import apply_rate
from libs.common.logging import get_logger
from libs.common.service_client import ApiError, platform_request, unwrap_data
from services.payments_service.schemas import (
    BasePlan,
    CheckoutOptions,
    CheckoutSession,
    ConnectStatus,
    RefundOptions,
    Transaction,
    TransactionStats,
    TransactionStatus,
)

logger = get_logger(__name__)

# Platform fee per plan (fraction of the gross amount)
FEE_RATES = {
    BasePlan.FREE: 0.02,
    BasePlan.PREMIUM: 0.005,
}


class PaymentsClient:
    """Async client for the platform payments API."""

    def __init__(
        self,
        app_id: Optional[str] = None,
        app_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.app_id = app_id or settings.VLIBE_BASE_APP_ID
        if not self.app_id:
            raise ValueError("PaymentsClient: app_id is required")
        self.app_secret = app_secret or settings.VLIBE_BASE_APP_SECRET
        if not self.app_secret:
            raise ValueError("PaymentsClient: app_secret is required")
        self.base_url = (base_url or settings.VLIBE_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport
        self._headers = {
            "X-App-Id": self.app_id,
            "X-App-Secret": self.app_secret,
        }

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_data: Optional[dict] = None,
    ):
        """Make an authenticated request to the payments API and unwrap ``data``."""
        body = await platform_request(
            url=f"{self.base_url}/api/base/payments{endpoint}",
            method=method,
            headers=self._headers,
            params=params,
            json=json_data,
            timeout=self.timeout,
            transport=self._transport,
            default_error="Payment API request failed",
        )
        return unwrap_data(body)

    # =========================================================================
    # Stripe Connect
    # =========================================================================

    async def get_connect_onboarding_url(self, return_url: str) -> str:
        """
        Get the Stripe Connect onboarding URL.

        Args:
            return_url: URL the seller returns to after onboarding

        Returns:
            The onboarding URL to redirect the seller to
        """
        data = await self._request(
            "POST", "/connect/onboard", json_data={"returnUrl": return_url}
        )
        return data["url"]

    async def get_connect_status(self) -> ConnectStatus:
        data = await self._request("GET", "/connect/status")
        return ConnectStatus.model_validate(data)

    # =========================================================================
    # Checkout
    # =========================================================================

    async def create_checkout(self, options: CheckoutOptions) -> CheckoutSession:
        """
        Create a checkout session for a one-time payment.

        The platform fee is computed server-side from the app's plan.

        Returns:
            CheckoutSession whose ``url`` the user should be redirected to
        """
        data = await self._request(
            "POST", "/checkout", json_data=options.to_record(exclude_none=True)
        )
        session = CheckoutSession.model_validate(data)
        logger.info(
            "Created checkout session %s amount=%d %s",
            session.id,
            session.amount,
            session.currency,
        )
        return session

    async def get_checkout_session(self, session_id: str) -> Optional[CheckoutSession]:
        try:
            data = await self._request("GET", f"/checkout/{session_id}")
        except ApiError as exc:
            if exc.is_not_found:
                return None
            raise
        return CheckoutSession.model_validate(data)

    # =========================================================================
    # Transactions
    # =========================================================================

    async def get_transactions(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        status: Optional[TransactionStatus] = None,
    ) -> list[Transaction]:
        params = {
            "limit": limit or None,
            "offset": offset or None,
            "status": TransactionStatus(status).value if status else None,
        }
        data = await self._request("GET", "/transactions", params=params)
        return [Transaction.model_validate(item) for item in data or []]

    async def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        try:
            data = await self._request("GET", f"/transactions/{transaction_id}")
        except ApiError as exc:
            if exc.is_not_found:
                return None
            raise
        return Transaction.model_validate(data)

    async def get_transaction_stats(self) -> TransactionStats:
        data = await self._request("GET", "/transactions/stats")
        return TransactionStats.model_validate(data)

    # =========================================================================
    # Refunds
    # =========================================================================

    async def create_refund(self, options: RefundOptions) -> Transaction:
        """
        Refund a transaction, fully or partially.

        Platform fees are not returned on refund.
        """
        data = await self._request(
            "POST", "/refunds", json_data=options.to_record(exclude_none=True)
        )
        logger.info("Refund issued for transaction %s", options.transaction_id)
        return Transaction.model_validate(data)

    # =========================================================================
    # Fee math
    # =========================================================================

    @staticmethod
    def calculate_fee(amount: int, plan: Union[BasePlan, str] = BasePlan.FREE) -> int:
        """Platform fee in minor units: 2% on free, 0.5% on premium."""
        return apply_rate(amount, FEE_RATES[BasePlan(plan)])

    @classmethod
    def calculate_net_amount(
        cls, amount: int, plan: Union[BasePlan, str] = BasePlan.FREE
    ) -> int:
        return amount - cls.calculate_fee(amount, plan)
