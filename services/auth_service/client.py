"""
Single sign-on client for platform users.

Verifies session tokens issued by the platform SSO flow and builds the
login/logout redirect URLs. Feature and tier checks are local and make no
network calls.
"""

from typing import Optional
from urllib.parse import urlencode

import httpx
from libs.common.config import get_settings
from libs.common.logging import get_logger
from libs.common.service_client import ApiError, platform_request
from pydantic import ValidationError
from services.auth_service.models import VerifyResponse, VlibeUser

logger = get_logger(__name__)

APP_TYPE = "base"


class AuthClient:
    """Async client for SSO session verification."""

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
            raise ValueError("AuthClient: app_id is required")
        self.app_secret = app_secret or settings.VLIBE_BASE_APP_SECRET
        if not self.app_secret:
            raise ValueError("AuthClient: app_secret is required")
        self.base_url = (base_url or settings.VLIBE_BASE_URL).rstrip("/")
        self.timeout = timeout or settings.HTTP_TIMEOUT
        self._transport = transport

    async def verify_session(self, token: Optional[str]) -> Optional[VlibeUser]:
        """
        Verify a session token and return the user it belongs to.

        Args:
            token: The session token from the SSO callback

        Returns:
            The user if the token is valid, None otherwise. Rejected tokens and
            unreachable SSO endpoints both yield None.
        """
        if not token:
            return None

        try:
            body = await platform_request(
                url=f"{self.base_url}/api/auth/sso/verify",
                method="POST",
                json={
                    "token": token,
                    "appId": self.app_id,
                    "appSecret": self.app_secret,
                    "appType": APP_TYPE,
                },
                timeout=self.timeout,
                transport=self._transport,
            )
        except ApiError as exc:
            logger.info("Session token rejected (status=%s)", exc.status_code)
            return None
        except httpx.RequestError as exc:
            logger.error("Failed to verify session: %s", exc)
            return None

        try:
            result = VerifyResponse.model_validate(body)
        except ValidationError:
            logger.warning("Malformed SSO verify response")
            return None

        if result.valid and result.user:
            return result.user
        return None

    def get_login_url(self, redirect_path: str = "/") -> str:
        """Return the SSO URL that unauthenticated users are sent to."""
        params = urlencode(
            {"app_id": self.app_id, "app_type": APP_TYPE, "redirect": redirect_path}
        )
        return f"{self.base_url}/api/auth/sso?{params}"

    def get_logout_url(self, redirect_path: str = "/") -> str:
        params = urlencode({"app_id": self.app_id, "redirect": redirect_path})
        return f"{self.base_url}/api/auth/sso/logout?{params}"

    @staticmethod
    def has_feature(user: Optional[VlibeUser], feature: str) -> bool:
        """Platform subscribers get everything; others need the feature or ``*``."""
        if user is None:
            return False
        if user.subscription_type == "platform":
            return True
        if user.app_access and user.app_access.features:
            features = user.app_access.features
            return "*" in features or feature in features
        return False

    @staticmethod
    def has_subscription(user: Optional[VlibeUser]) -> bool:
        return user is not None and user.subscription_type is not None

    @staticmethod
    def get_tier(user: Optional[VlibeUser]) -> Optional[str]:
        if user is None:
            return None
        if user.subscription_type == "platform":
            return "platform"
        if user.app_access:
            return user.app_access.tier
        return None
