"""
Session module interface.

The profile slot is ordinary local storage, separate from the credential
slot owned by the auth module.
"""

from typing import Protocol, Optional, runtime_checkable

from modules.auth.models import UserProfile


@runtime_checkable
class IProfileStore(Protocol):
    """Persistence for the single signed-in UserProfile."""

    def load(self) -> Optional[UserProfile]:
        """
        Load the persisted profile.

        Returns:
            The profile, or None when nothing usable is stored
        """
        ...

    def save(self, profile: UserProfile) -> None:
        """
        Persist the profile, replacing any previous one.

        Raises:
            PersistenceError: If the write fails
        """
        ...

    def clear(self) -> None:
        """Remove the persisted profile. Clearing an empty slot is not an error."""
        ...
