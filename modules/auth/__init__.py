"""
Authentication module.

Handles the phone/OTP login flow, bearer token storage, and normalization
of the backend user payload into a UserProfile.

Public API:
- IAuthService / AuthService: backend auth endpoints
- ITokenStore / KeyringTokenStore / InMemoryTokenStore: credential slot
- LoginFlow / LoginStep: onboarding state machine
- UserProfile, OnboardingDraft and the request/response models
- Auth exceptions: TokenPersistenceError, InvalidRoleError, etc.
"""

from .interfaces import IAuthService, ITokenStore
from .models import (
    ApiUser,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    OnboardingDraft,
    ProfileResponse,
    StartLoginRequest,
    StartLoginResponse,
    UserProfile,
    VerifyCodeRequest,
    VerifyCodeResponse,
)
from .exceptions import (
    TokenPersistenceError,
    InvalidRoleError,
    ResendCooldownError,
    FlowStateError,
)
from .token_store import KeyringTokenStore, InMemoryTokenStore, create_token_store
from .service import AuthService
from .login_flow import LoginFlow, LoginStep

__all__ = [
    # Interfaces
    "IAuthService",
    "ITokenStore",
    # Implementations
    "AuthService",
    "KeyringTokenStore",
    "InMemoryTokenStore",
    "create_token_store",
    "LoginFlow",
    "LoginStep",
    # Models
    "ApiUser",
    "ErrorResponse",
    "LoginRequest",
    "LoginResponse",
    "OnboardingDraft",
    "ProfileResponse",
    "StartLoginRequest",
    "StartLoginResponse",
    "UserProfile",
    "VerifyCodeRequest",
    "VerifyCodeResponse",
    # Exceptions
    "TokenPersistenceError",
    "InvalidRoleError",
    "ResendCooldownError",
    "FlowStateError",
]
