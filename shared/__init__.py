"""
Shared infrastructure for the HeartBridge client.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- api_client: Typed HTTP client for the backend
- exceptions: Base exception classes
- models: Wire/local naming base model and shared enums

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .api_client import APIClient, create_api_client
from .exceptions import (
    HeartBridgeError,
    ValidationError,
    PersistenceError,
    APIError,
    InvalidURLError,
    InvalidResponseError,
    ServerError,
    DecodingError,
)
from .models import ApiModel, SubscriptionTier, UserRole, keys_to_camel, keys_to_snake

__all__ = [
    "Settings",
    "get_settings",
    "APIClient",
    "create_api_client",
    "HeartBridgeError",
    "ValidationError",
    "PersistenceError",
    "APIError",
    "InvalidURLError",
    "InvalidResponseError",
    "ServerError",
    "DecodingError",
    "ApiModel",
    "SubscriptionTier",
    "UserRole",
    "keys_to_camel",
    "keys_to_snake",
]
