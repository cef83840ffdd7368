"""
Authentication service implementation.

Wraps the backend auth endpoints on top of the shared APIClient.
"""

import logging
from typing import Optional

from shared.api_client import APIClient

from .interfaces import IAuthService
from .models import (
    ApiUser,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    StartLoginRequest,
    StartLoginResponse,
    VerifyCodeRequest,
    VerifyCodeResponse,
)

logger = logging.getLogger(__name__)

START_LOGIN_PATH = "/api/auth/start-login"
VERIFY_CODE_PATH = "/api/auth/verify-code"
LOGIN_PATH = "/api/auth/login"
PROFILE_PATH = "/api/auth/me"


class AuthService(IAuthService):
    """
    Implementation of the auth service.

    All errors are APIError subclasses raised by the client; this class
    adds no handling of its own so callers see the underlying failure.
    """

    def __init__(self, api_client: APIClient):
        self._api = api_client

    async def start_login(self, request: StartLoginRequest) -> StartLoginResponse:
        logger.debug(f"Requesting verification code for {request.user_type.value}")
        return await self._api.post(START_LOGIN_PATH, request, StartLoginResponse)

    async def verify_code(self, request: VerifyCodeRequest) -> VerifyCodeResponse:
        return await self._api.post(VERIFY_CODE_PATH, request, VerifyCodeResponse)

    async def login(self, phone: str) -> LoginResponse:
        return await self._api.post(LOGIN_PATH, LoginRequest(phone=phone), LoginResponse)

    async def fetch_profile(self) -> Optional[ApiUser]:
        """
        Fetch the current user from the backend.

        Not called at startup; the session trusts the persisted profile.
        """
        response: ProfileResponse = await self._api.get(PROFILE_PATH, ProfileResponse)
        return response.user
