"""
Authentication module interfaces.

Other modules should depend on these protocols, not the concrete
implementations. This enables testing with in-memory fakes.
"""

from typing import Protocol, Optional, runtime_checkable

from .models import (
    ApiUser,
    LoginResponse,
    StartLoginRequest,
    StartLoginResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)


@runtime_checkable
class ITokenStore(Protocol):
    """
    Storage for the single bearer token of this installation.

    Exactly zero or one token exists at any time.
    """

    def save_token(self, token: str) -> None:
        """
        Store a token, replacing any existing one.

        Raises:
            PersistenceError: If the underlying store rejects the write
        """
        ...

    def get_token(self) -> Optional[str]:
        """Return the stored token, or None when logged out. Never raises."""
        ...

    def clear_token(self) -> None:
        """
        Remove the stored token. Clearing an empty store is not an error.

        Raises:
            PersistenceError: If the underlying store rejects the delete
        """
        ...


@runtime_checkable
class IAuthService(Protocol):
    """
    Interface for the backend auth endpoints.

    Implementations raise APIError subclasses on failure.
    """

    async def start_login(self, request: StartLoginRequest) -> StartLoginResponse:
        """
        Ask the backend to send a verification code.

        Args:
            request: Role, names and phone number captured during onboarding

        Returns:
            StartLoginResponse with a status message
        """
        ...

    async def verify_code(self, request: VerifyCodeRequest) -> VerifyCodeResponse:
        """
        Exchange a verification code for a bearer token and user payload.
        """
        ...

    async def login(self, phone: str) -> LoginResponse:
        """Log in an existing user by phone number."""
        ...

    async def fetch_profile(self) -> Optional[ApiUser]:
        """Fetch the authenticated user's profile, if the backend has one."""
        ...
