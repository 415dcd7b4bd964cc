"""Integration tests for SSO session verification."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from services.auth_service.client import AuthClient
from services.auth_service.models import VlibeUser
from tests.stubs import BASE_URL

VERIFY = "/api/auth/sso/verify"

USER = {
    "id": "user-1",
    "email": "swimmer@example.com",
    "name": "Test Swimmer",
    "subscriptionType": "individual",
    "appAccess": {"tier": "pro", "features": ["export"]},
}


# ---------------------------------------------------------------------------
# verify_session
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_session_returns_user(auth_client, platform):
    platform.add("POST", VERIFY, json_data={"valid": True, "user": USER})

    user = await auth_client.verify_session("tok-123")

    assert user.id == "user-1"
    assert user.subscription_type == "individual"
    assert user.app_access.tier == "pro"
    assert platform.last_json() == {
        "token": "tok-123",
        "appId": "app-1",
        "appSecret": "secret-1",
        "appType": "base",
    }


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_session_without_token_skips_request(auth_client, platform):
    assert await auth_client.verify_session("") is None
    assert await auth_client.verify_session(None) is None
    assert platform.requests == []


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_session_invalid_token(auth_client, platform):
    platform.add("POST", VERIFY, json_data={"valid": False, "error": "expired"})

    assert await auth_client.verify_session("tok-old") is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_session_rejected_status(auth_client, platform):
    platform.add("POST", VERIFY, status_code=401, json_data={"error": "Unauthorized"})

    assert await auth_client.verify_session("tok-bad") is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_session_network_error():
    def fail(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = AuthClient(
        app_id="app-1",
        app_secret="secret-1",
        base_url=BASE_URL,
        transport=httpx.MockTransport(fail),
    )

    assert await client.verify_session("tok-123") is None


@pytest.mark.asyncio
@pytest.mark.integration
async def test_verify_session_malformed_user(auth_client, platform):
    platform.add(
        "POST", VERIFY, json_data={"valid": True, "user": {"id": "u", "email": "nope"}}
    )

    assert await auth_client.verify_session("tok-123") is None


# ---------------------------------------------------------------------------
# Redirect URLs
# ---------------------------------------------------------------------------


@pytest.mark.integration
def test_login_url(auth_client):
    url = urlparse(auth_client.get_login_url("/dashboard"))

    assert f"{url.scheme}://{url.netloc}{url.path}" == f"{BASE_URL}/api/auth/sso"
    assert parse_qs(url.query) == {
        "app_id": ["app-1"],
        "app_type": ["base"],
        "redirect": ["/dashboard"],
    }


@pytest.mark.integration
def test_logout_url(auth_client):
    url = urlparse(auth_client.get_logout_url())

    assert url.path == "/api/auth/sso/logout"
    assert parse_qs(url.query) == {"app_id": ["app-1"], "redirect": ["/"]}


# ---------------------------------------------------------------------------
# Local access checks
# ---------------------------------------------------------------------------


def _user(**overrides) -> VlibeUser:
    return VlibeUser.model_validate({**USER, **overrides})


class TestAccessChecks:
    def test_platform_subscriber_has_every_feature(self):
        user = _user(subscriptionType="platform", appAccess=None)
        assert AuthClient.has_feature(user, "anything")
        assert AuthClient.get_tier(user) == "platform"

    def test_feature_list(self):
        user = _user()
        assert AuthClient.has_feature(user, "export")
        assert not AuthClient.has_feature(user, "import")

    def test_wildcard_feature(self):
        user = _user(appAccess={"tier": "max", "features": ["*"]})
        assert AuthClient.has_feature(user, "import")

    def test_no_user(self):
        assert not AuthClient.has_feature(None, "export")
        assert not AuthClient.has_subscription(None)
        assert AuthClient.get_tier(None) is None

    def test_subscription(self):
        assert AuthClient.has_subscription(_user())
        assert not AuthClient.has_subscription(_user(subscriptionType=None))

    def test_tier_from_app_access(self):
        assert AuthClient.get_tier(_user()) == "pro"
        assert AuthClient.get_tier(_user(appAccess=None)) is None
