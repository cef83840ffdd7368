"""
Session module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from shared.models import UserRole
from modules.auth.login_flow import LoginFlow
from modules.auth.models import UserProfile


class AppTab(str, Enum):
    """Top-level screens of the main app."""

    PREDICTIVE = "predictive"
    VIDEO = "video"
    COMMUNITY = "community"
    RESOURCES = "resources"
    SESSIONS = "sessions"


TABS_BY_ROLE: dict[UserRole, tuple[AppTab, ...]] = {
    UserRole.PARENT: (AppTab.PREDICTIVE, AppTab.VIDEO, AppTab.COMMUNITY, AppTab.RESOURCES),
    UserRole.EXPERT: (AppTab.SESSIONS, AppTab.COMMUNITY),
}


def home_tab(role: UserRole) -> AppTab:
    """Landing tab: session management for experts, predictive support for parents."""
    return AppTab.SESSIONS if role == UserRole.EXPERT else AppTab.PREDICTIVE


class SessionState(BaseModel):
    """
    What the app shows right now.

    ``login_flow`` is set whenever the user is not authenticated.
    ``has_credential`` reports whether a token is stored; a persisted
    profile without one is still treated as authenticated.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    profile: Optional[UserProfile] = None
    active_tab: AppTab = AppTab.PREDICTIVE
    has_credential: bool = False
    login_flow: Optional[LoginFlow] = None

    @property
    def is_authenticated(self) -> bool:
        return self.profile is not None

    @property
    def available_tabs(self) -> tuple[AppTab, ...]:
        if self.profile is None:
            return ()
        return TABS_BY_ROLE[self.profile.role]
