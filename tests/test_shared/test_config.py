"""
Tests for environment-sourced settings.
"""

import pytest

from shared.config import DEFAULT_ADMIN_EMAIL, DEFAULT_SITE_URL, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Run each test without inherited env vars or a stray .env file."""
    for name in ("RESEND_API_KEY", "ADMIN_EMAIL", "SITE_URL", "EMAIL_MAX_ATTEMPTS", "STORE_NAME"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    """Tests for values applied when the environment is silent."""

    def test_defaults(self):
        settings = Settings()

        assert settings.resend_api_key is None
        assert settings.admin_email == DEFAULT_ADMIN_EMAIL
        assert settings.site_url == DEFAULT_SITE_URL
        assert settings.email_max_attempts == 3
        assert settings.email_retry_base_delay == 1.0

    def test_sender_headers(self):
        settings = Settings()

        assert settings.customer_sender == "Skardu Organics <orders@skarduorganic.com>"
        assert settings.admin_sender == "Skardu Organics Orders <orders@skarduorganic.com>"


class TestEnvironment:
    """Tests for values read from the environment."""

    def test_reads_env(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_live")
        monkeypatch.setenv("ADMIN_EMAIL", "ops@example.com")
        monkeypatch.setenv("SITE_URL", "https://example.com/")
        monkeypatch.setenv("EMAIL_MAX_ATTEMPTS", "5")

        settings = Settings()

        assert settings.resend_api_key == "re_live"
        assert settings.admin_email == "ops@example.com"
        assert settings.site_url == "https://example.com"
        assert settings.email_max_attempts == 5

    def test_blank_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("ADMIN_EMAIL", "  ")
        monkeypatch.setenv("SITE_URL", "")

        settings = Settings()

        assert settings.admin_email == DEFAULT_ADMIN_EMAIL
        assert settings.site_url == DEFAULT_SITE_URL

    def test_admin_mailbox_can_be_disabled(self):
        assert Settings(admin_email=None).admin_email is None
