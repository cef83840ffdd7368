"""
Session bootstrap and lifecycle.

On start the persisted profile alone decides what to show; the stored
token is not validated over the network, so a stale token is discovered
only when the first authenticated call fails with a ServerError.
"""

import logging
from typing import Optional

from shared.api_client import create_api_client
from shared.config import Settings, get_settings
from shared.exceptions import PersistenceError, ValidationError
from shared.models import SubscriptionTier
from modules.auth.interfaces import IAuthService, ITokenStore
from modules.auth.login_flow import LoginFlow
from modules.auth.models import UserProfile
from modules.auth.service import AuthService
from modules.auth.token_store import create_token_store

from .interfaces import IProfileStore
from .models import AppTab, SessionState, TABS_BY_ROLE, home_tab
from .profile_store import create_profile_store

logger = logging.getLogger(__name__)


class SessionService:
    """
    Owns the current SessionState.

    The profile and the token live in separate stores; this service
    keeps both in step on login and logout.
    """

    def __init__(
        self,
        profile_store: IProfileStore,
        token_store: ITokenStore,
        auth_service: IAuthService,
        resend_cooldown: float = 30.0,
    ):
        self._profiles = profile_store
        self._tokens = token_store
        self._auth = auth_service
        self._resend_cooldown = resend_cooldown
        self.state = SessionState()

    def bootstrap(self) -> SessionState:
        """
        Decide the initial screen from local state only.

        Returns:
            Authenticated state on the role's home tab when a profile is
            persisted, otherwise a fresh login flow at role selection.
        """
        profile = self._profiles.load()
        has_credential = self._tokens.get_token() is not None

        if profile is None:
            self.state = SessionState(has_credential=has_credential, login_flow=self.begin_login())
            return self.state

        if not has_credential:
            logger.warning("Persisted profile has no stored credential; API calls will be unauthenticated")

        self.state = SessionState(
            profile=profile,
            active_tab=home_tab(profile.role),
            has_credential=has_credential,
        )
        return self.state

    def begin_login(self) -> LoginFlow:
        """Create a login flow that finalizes this session when it completes."""
        return LoginFlow(
            self._auth,
            self._tokens,
            on_complete=self.complete_login,
            resend_cooldown=self._resend_cooldown,
        )

    def complete_login(self, profile: UserProfile) -> None:
        """Persist a freshly verified profile and land on the role's home tab."""
        self._profiles.save(profile)
        self.state = SessionState(
            profile=profile,
            active_tab=home_tab(profile.role),
            has_credential=self._tokens.get_token() is not None,
        )
        logger.info(f"Session started for {profile.role.value}")

    def select_tab(self, tab: AppTab) -> None:
        profile = self._require_profile()
        if tab not in TABS_BY_ROLE[profile.role]:
            raise ValidationError(
                f"Tab {tab.value} is not available for {profile.role.value}",
                code="TAB_UNAVAILABLE",
                details={"tab": tab.value, "role": profile.role.value},
            )
        self.state.active_tab = tab

    def update_subscription(self, tier: SubscriptionTier) -> UserProfile:
        """Move the signed-in user to another subscription tier."""
        profile = self._require_profile().with_subscription(tier)
        self._store(profile)
        return profile

    def add_points(self, delta: int) -> UserProfile:
        """Award (or deduct) points for the signed-in user."""
        profile = self._require_profile().with_points_added(delta)
        self._store(profile)
        return profile

    def logout(self) -> SessionState:
        """
        Clear the profile and the token and return to role selection.

        The profile is cleared first. If the token cannot be cleared the
        session is still reset and the PersistenceError is re-raised.
        """
        self._profiles.clear()
        self.state = SessionState(login_flow=self.begin_login())
        try:
            self._tokens.clear_token()
        except PersistenceError:
            self.state.has_credential = True
            logger.warning("Logged out but the stored credential could not be cleared")
            raise
        logger.info("Logged out")
        return self.state

    def _require_profile(self) -> UserProfile:
        if self.state.profile is None:
            raise ValidationError("No user is signed in", code="NOT_SIGNED_IN")
        return self.state.profile

    def _store(self, profile: UserProfile) -> None:
        self._profiles.save(profile)
        self.state.profile = profile


def create_session_service(settings: Optional[Settings] = None) -> SessionService:
    """Wire the session service with the real stores and API client."""
    settings = settings or get_settings()
    token_store = create_token_store(settings)
    api_client = create_api_client(token_store, settings)
    return SessionService(
        create_profile_store(settings),
        token_store,
        AuthService(api_client),
        resend_cooldown=settings.otp_resend_cooldown_seconds,
    )
