"""
Credential store implementations.

- KeyringTokenStore: OS-backed secure storage via the keyring library
- InMemoryTokenStore: single in-process slot for tests and previews

Both guard save/clear with a lock so concurrent calls cannot leave more
than one token behind.
"""

import logging
import threading
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from shared.config import Settings, get_settings

from .exceptions import TokenPersistenceError

logger = logging.getLogger(__name__)


class KeyringTokenStore:
    """
    Token store backed by the platform keychain.

    The token lives under a fixed service/account pair scoped to this app.
    """

    def __init__(self, service: str, account: str):
        self._service = service
        self._account = account
        self._lock = threading.Lock()

    def save_token(self, token: str) -> None:
        """Replace any stored token with ``token``."""
        with self._lock:
            self._delete_if_exists()
            try:
                keyring.set_password(self._service, self._account, token)
            except KeyringError as e:
                raise TokenPersistenceError(f"Could not save token: {e}")

    def get_token(self) -> Optional[str]:
        try:
            return keyring.get_password(self._service, self._account)
        except KeyringError as e:
            logger.warning(f"Keychain read failed, treating as logged out: {e}")
            return None

    def clear_token(self) -> None:
        with self._lock:
            self._delete_if_exists()

    def _delete_if_exists(self) -> None:
        try:
            keyring.delete_password(self._service, self._account)
        except PasswordDeleteError:
            # Nothing stored
            pass
        except KeyringError as e:
            raise TokenPersistenceError(f"Could not delete token: {e}")


class InMemoryTokenStore:
    """
    Process-local token store.

    ``fail_saves`` and ``fail_clears`` simulate an unavailable keychain.
    """

    def __init__(self, token: Optional[str] = None):
        self._token = token
        self._lock = threading.Lock()
        self.fail_saves = False
        self.fail_clears = False

    def save_token(self, token: str) -> None:
        with self._lock:
            if self.fail_saves:
                raise TokenPersistenceError("Could not save token: store unavailable")
            self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    def clear_token(self) -> None:
        with self._lock:
            if self.fail_clears:
                raise TokenPersistenceError("Could not delete token: store unavailable")
            self._token = None


def create_token_store(settings: Optional[Settings] = None) -> KeyringTokenStore:
    """Build the keychain-backed store from settings."""
    settings = settings or get_settings()
    return KeyringTokenStore(settings.keyring_service, settings.keyring_account)
