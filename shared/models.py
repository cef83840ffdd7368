"""
Shared data models used across modules.

Field naming has three forms:
- Python attributes are snake_case
- the local serialized form (aliases, persistence) is lowerCamelCase
- the wire form exchanged with the backend is snake_case

The API client converts between the local and wire forms with
``keys_to_snake`` / ``keys_to_camel``, applied to requests and responses alike.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel, to_snake


def keys_to_snake(value: Any) -> Any:
    """Recursively convert mapping keys from lowerCamelCase to snake_case."""
    if isinstance(value, dict):
        return {to_snake(key): keys_to_snake(item) for key, item in value.items()}
    if isinstance(value, list):
        return [keys_to_snake(item) for item in value]
    return value


def keys_to_camel(value: Any) -> Any:
    """Recursively convert mapping keys from snake_case to lowerCamelCase."""
    if isinstance(value, dict):
        return {_snake_key_to_camel(key): keys_to_camel(item) for key, item in value.items()}
    if isinstance(value, list):
        return [keys_to_camel(item) for item in value]
    return value


def _snake_key_to_camel(key: str) -> str:
    # Keys without underscores are already in their final form
    if "_" not in key.strip("_"):
        return key
    return to_camel(key)


class ApiModel(BaseModel):
    """
    Base class for objects that are sent over the network or persisted.

    Aliases are the lowerCamelCase local names; both aliases and attribute
    names are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_local(self) -> dict[str, Any]:
        """Dump with camelCase keys, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserRole(str, Enum):
    """Who is using the app."""

    PARENT = "parent"
    EXPERT = "expert"


class SubscriptionTier(str, Enum):
    """Service levels gating features in the non-core screens."""

    FREE = "free"
    CORE = "core"
    PLUS = "plus"
    PREMIUM = "premium"
    INDIVIDUAL = "individual"
    BUNDLE = "bundle"
