"""
Centralized configuration for the HeartBridge client.

All settings are loaded from environment variables with sensible defaults.
The API base URL is the only setting that changes network behaviour.
"""

from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "HeartBridge"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Backend
    api_base_url: str = "http://localhost:8000"

    # Credential slot in the OS keychain
    keyring_service: str = "com.heartbridge.HeartBridge"
    keyring_account: str = "authToken"

    # Profile slot in ordinary local storage
    storage_dir: Path = Path.home() / ".heartbridge"
    profile_storage_key: str = "heartbridge_user_profile"

    # Login flow
    otp_resend_cooldown_seconds: float = 30.0


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
