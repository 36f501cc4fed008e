"""
Unit tests for application settings.
"""

import pytest

from crudhub.config import Settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        """Test the defaults used by list endpoints and numbering."""
        settings = make_settings()

        assert settings.default_page_size == 10
        assert settings.max_page_size == 100
        assert settings.invoice_number_max_retries == 3
        assert settings.is_sqlite

    def test_comma_separated_lists(self):
        """Test parsing of comma-separated origins and hosts."""
        settings = make_settings(
            cors_origins="https://app.example.com, https://admin.example.com",
            trusted_hosts="api.example.com"
        )

        assert settings.cors_origins == ["https://app.example.com", "https://admin.example.com"]
        assert settings.trusted_hosts == ["api.example.com"]

    def test_blank_origins_fall_back_to_defaults(self):
        """Test that a blank value keeps the default origins."""
        settings = make_settings(cors_origins=" ")

        assert settings.cors_origins == ["http://localhost:3000", "http://localhost:8080"]

    def test_log_format(self):
        """Test that only text and json formats are accepted."""
        assert make_settings(log_format="JSON").log_format == "json"

        with pytest.raises(ValueError):
            make_settings(log_format="xml")

    def test_production_rejects_sqlite(self):
        """Test that production needs a server database."""
        settings = make_settings(environment="production")

        with pytest.raises(ValueError, match="server database"):
            settings.validate_environment()

    def test_production_rejects_debug(self):
        """Test that production cannot run in debug mode."""
        settings = make_settings(
            environment="production",
            debug=True,
            database_url="postgresql://crudhub@db/crudhub"
        )

        with pytest.raises(ValueError, match="DEBUG"):
            settings.validate_environment()
