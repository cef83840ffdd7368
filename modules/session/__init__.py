"""
Session module.

Bootstraps the app from the persisted profile, hands out login flows,
and clears everything on logout.

Public API:
- SessionService: bootstrap, login completion, logout, profile updates
- SessionState / AppTab: what the app currently shows
- IProfileStore / FileProfileStore / InMemoryProfileStore: profile slot
"""

from .interfaces import IProfileStore
from .models import AppTab, SessionState, home_tab
from .profile_store import FileProfileStore, InMemoryProfileStore, create_profile_store
from .service import SessionService, create_session_service

__all__ = [
    "IProfileStore",
    "AppTab",
    "SessionState",
    "home_tab",
    "FileProfileStore",
    "InMemoryProfileStore",
    "create_profile_store",
    "SessionService",
    "create_session_service",
]
