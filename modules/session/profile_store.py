"""
Profile store implementations.

- FileProfileStore: one JSON file under the app's storage directory
- InMemoryProfileStore: for tests
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings, get_settings
from shared.exceptions import PersistenceError
from modules.auth.models import UserProfile

logger = logging.getLogger(__name__)


class FileProfileStore:
    """
    Stores the profile as camelCase JSON in ``<directory>/<key>.json``.

    Writes go through a temporary file and ``os.replace`` so a crash never
    leaves a half-written profile behind.
    """

    def __init__(self, directory: Path, key: str):
        self._directory = Path(directory)
        self._path = self._directory / f"{key}.json"

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[UserProfile]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read profile from {self._path}: {e}")
            return None

        try:
            return UserProfile.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning(f"Ignoring unreadable profile at {self._path}")
            return None

    def save(self, profile: UserProfile) -> None:
        data = profile.model_dump_json(by_alias=True, exclude_none=True)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self._directory, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp_path, self._path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not save profile: {e}", store="profile")

    def clear(self) -> None:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Could not clear profile: {e}", store="profile")


class InMemoryProfileStore:
    """Process-local profile slot."""

    def __init__(self, profile: Optional[UserProfile] = None):
        self._profile = profile

    def load(self) -> Optional[UserProfile]:
        return self._profile

    def save(self, profile: UserProfile) -> None:
        self._profile = profile

    def clear(self) -> None:
        self._profile = None


def create_profile_store(settings: Optional[Settings] = None) -> FileProfileStore:
    """Build the file-backed store from settings."""
    settings = settings or get_settings()
    return FileProfileStore(settings.storage_dir, settings.profile_storage_key)
