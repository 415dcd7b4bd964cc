from typing import Literal, Optional

from libs.common.models import WireModel
from pydantic import EmailStr, Field

SubscriptionType = Literal["platform", "individual"]


class AppAccess(WireModel):
    tier: Optional[str] = None
    features: list[str] = Field(default_factory=list)


class VlibeUser(WireModel):
    """
    A platform user as returned by SSO session verification.
    """

    id: str
    email: EmailStr
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    subscription_type: Optional[SubscriptionType] = None
    app_access: Optional[AppAccess] = None


class VerifyResponse(WireModel):
    valid: bool = False
    user: Optional[VlibeUser] = None
    error: Optional[str] = None
