"""
Centralized configuration for the Pocketbook session layer.

All settings are loaded from environment variables with sensible defaults.
Channel-specific settings are namespaced (e.g., AUTH_TOKEN_*, APPEARANCE_*).
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


SECONDS_PER_DAY = 24 * 60 * 60


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Pocketbook"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: Literal["development", "production", "test"] = "development"

    # Server (request gate)
    host: str = "0.0.0.0"
    port: int = 3000

    # Durable store. None keeps everything in memory for the process lifetime.
    storage_path: Optional[Path] = None

    # Account service
    account_service_url: str = "http://localhost:3000/api"
    account_service_timeout: float = 10.0

    # Session token
    auth_token_key: str = "authToken"
    auth_token_ttl_days: int = 7
    user_key: str = "user"

    # Appearance cookie
    appearance_cookie_max_age: int = 365 * SECONDS_PER_DAY

    # Navigation
    login_path: str = "/auth/login"
    home_path: str = "/dashboard"
    public_routes: list[str] = ["/auth/login", "/auth/signup"]

    @property
    def secure_cookies(self) -> bool:
        """Cookies carry the Secure attribute only in production."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
