"""Configuration Settings for Character Authentication

Manages environment variables and application configuration.
"""

from functools import lru_cache
from typing import Any, Dict

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Service info
    service_name: str = "character-authentication"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Database configuration
    database_url: str = "sqlite+aiosqlite:///./authentication.sqlite"
    sql_echo: bool = False

    # Session cookie
    session_secret_key: str = "dev-session-secret-change-in-production"
    session_cookie: str = "character_session"
    session_max_age: int = 14 * 24 * 60 * 60  # 14 days
    session_https_only: bool = False

    # Authenticator defaults, shared by every enabled authenticator
    success_redirect: str = "/"
    deferred_redirect: str = "/"
    failure_redirect: str = "/login"
    onboard_known_accounts: bool = True

    # Enabled authenticator types and per-type option overrides
    authenticators: list[str] = ["local"]
    authenticator_options: Dict[str, Dict[str, Any]] = {}

    # CORS configuration
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    def authenticator_config(self) -> Dict[str, Any]:
        """Options every authenticator receives before its own overrides"""
        return {
            "success_redirect": self.success_redirect,
            "deferred_redirect": self.deferred_redirect,
            "failure_redirect": self.failure_redirect,
            "onboard_known_accounts": self.onboard_known_accounts,
        }


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance

    Returns:
        Settings instance
    """
    return Settings()
