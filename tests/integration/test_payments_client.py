"""Integration tests for the platform payments client."""

import pytest
from libs.common.service_client import ApiError
from services.payments_service.client import PaymentsClient
from services.payments_service.schemas import (
    BasePlan,
    CheckoutOptions,
    RefundOptions,
    TransactionStatus,
)
from tests.stubs import ok

PAY = "/api/base/payments"

TRANSACTION = {
    "id": "txn-1",
    "amount": 1999,
    "vlibeFee": 40,
    "netAmount": 1959,
    "currency": "usd",
    "status": "succeeded",
    "stripeId": "pi_123",
    "userId": "user-1",
    "createdAt": "2024-03-01T10:00:00Z",
}

# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_checkout(payments_client, platform):
    platform.add(
        "POST",
        f"{PAY}/checkout",
        json_data=ok(
            {
                "id": "cs_1",
                "url": "https://checkout.test/cs_1",
                "amount": 1999,
                "currency": "usd",
                "status": "open",
            }
        ),
    )

    session = await payments_client.create_checkout(
        CheckoutOptions(
            amount=1999,
            user_id="user-1",
            success_url="https://shop.test/ok",
            cancel_url="https://shop.test/cancel",
        )
    )

    assert session.url == "https://checkout.test/cs_1"
    assert platform.last.headers["X-App-Id"] == "app-1"
    assert platform.last.headers["X-App-Secret"] == "secret-1"
    assert platform.last_json() == {
        "amount": 1999,
        "currency": "usd",
        "userId": "user-1",
        "successUrl": "https://shop.test/ok",
        "cancelUrl": "https://shop.test/cancel",
    }


def test_checkout_amount_must_be_positive():
    with pytest.raises(ValueError):
        CheckoutOptions(amount=0, success_url="a", cancel_url="b")


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_missing_checkout_session(payments_client, platform):
    platform.add("GET", f"{PAY}/checkout/cs_x", status_code=404, json_data={})

    assert await payments_client.get_checkout_session("cs_x") is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_payment_error_default_message(payments_client, platform):
    platform.add("GET", f"{PAY}/connect/status", status_code=502)

    with pytest.raises(ApiError) as exc_info:
        await payments_client.get_connect_status()

    assert exc_info.value.message == "Payment API request failed"
    assert exc_info.value.status_code == 502


# ---------------------------------------------------------------------------
# Connect
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_connect_onboarding_and_status(payments_client, platform):
    platform.add(
        "POST", f"{PAY}/connect/onboard", json_data=ok({"url": "https://connect.test"})
    )
    platform.add(
        "GET",
        f"{PAY}/connect/status",
        json_data=ok({"connected": True, "accountId": "acct_1", "chargesEnabled": True}),
    )

    url = await payments_client.get_connect_onboarding_url("https://shop.test/back")
    assert url == "https://connect.test"
    assert platform.last_json() == {"returnUrl": "https://shop.test/back"}

    status = await payments_client.get_connect_status()
    assert status.connected is True
    assert status.account_id == "acct_1"
    assert status.payouts_enabled is None


# ---------------------------------------------------------------------------
# Transactions & refunds
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_transactions_with_filters(payments_client, platform):
    platform.add("GET", f"{PAY}/transactions", json_data=ok([TRANSACTION]))

    transactions = await payments_client.get_transactions(
        limit=20, status=TransactionStatus.SUCCEEDED
    )

    assert transactions[0].net_amount == 1959
    assert transactions[0].status == TransactionStatus.SUCCEEDED
    params = platform.last.url.params
    assert params["limit"] == "20"
    assert params["status"] == "succeeded"
    assert "offset" not in params


@pytest.mark.asyncio
@pytest.mark.integration
async def test_get_transaction_and_stats(payments_client, platform):
    platform.add("GET", f"{PAY}/transactions/txn-1", json_data=ok(TRANSACTION))
    platform.add(
        "GET",
        f"{PAY}/transactions/stats",
        json_data=ok(
            {
                "totalRevenue": 10000,
                "totalFees": 200,
                "netRevenue": 9800,
                "transactionCount": 5,
                "thisMonth": {"revenue": 4000, "fees": 80, "net": 3920, "count": 2},
            }
        ),
    )

    transaction = await payments_client.get_transaction("txn-1")
    assert transaction.created_at == "2024-03-01T10:00:00Z"

    stats = await payments_client.get_transaction_stats()
    assert stats.net_revenue == 9800
    assert stats.this_month.count == 2


@pytest.mark.asyncio
@pytest.mark.integration
async def test_create_partial_refund(payments_client, platform):
    platform.add(
        "POST", f"{PAY}/refunds", json_data=ok({**TRANSACTION, "status": "refunded"})
    )

    refunded = await payments_client.create_refund(
        RefundOptions(transaction_id="txn-1", amount=500)
    )

    assert refunded.status == TransactionStatus.REFUNDED
    assert platform.last_json() == {"transactionId": "txn-1", "amount": 500}


# ---------------------------------------------------------------------------
# Fee math
# ---------------------------------------------------------------------------


class TestFees:
    def test_free_plan_fee(self):
        assert PaymentsClient.calculate_fee(10000) == 200
        assert PaymentsClient.calculate_net_amount(10000) == 9800

    def test_premium_plan_fee(self):
        assert PaymentsClient.calculate_fee(10000, BasePlan.PREMIUM) == 50
        assert PaymentsClient.calculate_net_amount(10000, "premium") == 9950

    def test_fee_rounds_half_up(self):
        # 2% of 1975 = 39.5
        assert PaymentsClient.calculate_fee(1975) == 40
