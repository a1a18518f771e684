"""
Runtime settings for the storefront backend.

All configuration is environment-sourced and read once per process through
get_settings(). Components receive the Settings object at construction
instead of reading the environment themselves.

Design decisions:
- pydantic-settings for typed env parsing (and .env support)
- Defaults mirror the production storefront so a bare deploy still works
- A blank ADMIN_EMAIL falls back to the default mailbox; passing
  admin_email=None explicitly disables the admin copy
"""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ADMIN_EMAIL = "admin@skarduorganic.com"
DEFAULT_SITE_URL = "https://skarduorganic.com"


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Email provider
    resend_api_key: Optional[str] = None
    resend_api_url: str = "https://api.resend.com"
    email_timeout: float = 10.0
    email_max_attempts: int = 3
    email_retry_base_delay: float = 1.0

    # Store identity
    store_name: str = "Skardu Organics"
    order_from_address: str = "orders@skarduorganic.com"
    support_email: str = "support@skarduorganic.com"
    admin_email: Optional[str] = DEFAULT_ADMIN_EMAIL
    site_url: str = DEFAULT_SITE_URL

    # Hosted database
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Static assets
    asset_base_url: str = "/"

    log_level: str = "INFO"

    @field_validator("admin_email", mode="before")
    @classmethod
    def _blank_admin_email(cls, value):
        if isinstance(value, str) and not value.strip():
            return DEFAULT_ADMIN_EMAIL
        return value

    @field_validator("site_url", mode="before")
    @classmethod
    def _blank_site_url(cls, value):
        if isinstance(value, str) and not value.strip():
            return DEFAULT_SITE_URL
        return value.rstrip("/") if isinstance(value, str) else value

    @property
    def customer_sender(self) -> str:
        """From header for customer receipts."""
        return f"{self.store_name} <{self.order_from_address}>"

    @property
    def admin_sender(self) -> str:
        """From header for operator notifications."""
        return f"{self.store_name} Orders <{self.order_from_address}>"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()
