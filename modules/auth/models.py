"""
Authentication module data models.

Request and response bodies for the auth endpoints, the normalized
UserProfile, and the transient OnboardingDraft.
"""

import re
from typing import Optional, Union

from pydantic import BaseModel, Field

from shared.models import ApiModel, SubscriptionTier, UserRole

PHONE_DIGITS = 10
CODE_DIGITS = 4


# -------------------------------------------------------------------------
# Requests
# -------------------------------------------------------------------------


class StartLoginRequest(ApiModel):
    """Body of POST /api/auth/start-login."""

    user_type: UserRole
    name: str
    child_name: Optional[str] = None
    phone: str


class VerifyCodeRequest(ApiModel):
    """Body of POST /api/auth/verify-code."""

    phone: str
    code: str


class LoginRequest(ApiModel):
    """Body of POST /api/auth/login."""

    phone: str


# -------------------------------------------------------------------------
# Responses
# -------------------------------------------------------------------------


class ApiUser(ApiModel):
    """
    User payload as returned by the backend.

    Every field is optional; the login flow fills gaps from local state.
    Role and tier stay plain strings here so that unknown server values
    can fall back instead of failing the whole response.
    """

    id: Optional[Union[int, str]] = None
    name: Optional[str] = None
    user_type: Optional[str] = None
    role: Optional[str] = None
    child_name: Optional[str] = None
    phone: Optional[str] = None
    subscription_tier: Optional[str] = None
    points: Optional[int] = None
    email: Optional[str] = None
    diagnosis: Optional[list[str]] = None
    severity: Optional[str] = None
    current_therapies: Optional[list[str]] = None
    goals: Optional[list[str]] = None
    gender: Optional[str] = None
    age: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class StartLoginResponse(ApiModel):
    message: str
    code: Optional[str] = None


class VerifyCodeResponse(ApiModel):
    message: str
    token: str
    user: ApiUser


class LoginResponse(ApiModel):
    message: str
    token: str
    user: ApiUser


class ProfileResponse(ApiModel):
    user: Optional[ApiUser] = None


class ErrorResponse(ApiModel):
    error: str


# -------------------------------------------------------------------------
# Local models
# -------------------------------------------------------------------------


class UserProfile(ApiModel):
    """
    The authenticated identity and caregiving context.

    For parents ``name`` holds the child's name and ``parent_name`` the
    caregiver's; for experts both hold the expert's name.
    """

    id: Optional[str] = Field(None, description="Server-assigned ID, if any")
    name: str
    parent_name: str
    role: UserRole
    points: int = Field(default=0, ge=0)
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    email: Optional[str] = None
    diagnosis: Optional[list[str]] = None
    severity: Optional[str] = None
    current_therapies: Optional[list[str]] = None
    goals: Optional[list[str]] = None
    gender: Optional[str] = None
    age: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.parent_name

    @property
    def child_name(self) -> Optional[str]:
        if self.role == UserRole.PARENT:
            return self.name
        return None

    @property
    def is_expert(self) -> bool:
        return self.role == UserRole.EXPERT

    def with_subscription(self, tier: SubscriptionTier) -> "UserProfile":
        """Return a copy on a different subscription tier."""
        return self.model_copy(update={"subscription_tier": tier})

    def with_points_added(self, delta: int) -> "UserProfile":
        """Return a copy with ``delta`` points added (never below zero)."""
        return self.model_copy(update={"points": max(0, self.points + delta)})


def digits_only(value: str, limit: Optional[int] = None) -> str:
    """Strip everything but digits, optionally truncating."""
    digits = re.sub(r"\D", "", value or "")
    return digits[:limit] if limit is not None else digits


class OnboardingDraft(BaseModel):
    """
    Fields entered during onboarding.

    Phone and code are kept as digits only, truncated the way the input
    fields do (10 phone digits, 4 code digits).
    """

    parent_name: str = ""
    child_name: str = ""
    phone: str = ""
    code: str = ""

    def set_phone(self, value: str) -> None:
        self.phone = digits_only(value, PHONE_DIGITS)

    def set_code(self, value: str) -> None:
        self.code = digits_only(value, CODE_DIGITS)


def format_phone_number(digits: str) -> str:
    """Format up to 10 digits as (555) 123-4567 for display."""
    digits = digits_only(digits)
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f"({digits[:3]}) {digits[3:]}"
    return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
