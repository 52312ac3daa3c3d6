"""Tests for application settings."""

import pytest
from pydantic import ValidationError

from finance_tracker.config import AppSettings, Settings, validate_all_settings


class TestAppSettings:
    def test_defaults(self):
        settings = AppSettings(_env_file=None)
        assert settings.load_seed_data is True
        assert settings.recent_transactions_limit == 5
        assert settings.default_category_color == "#94a3b8"
        assert settings.month_key_format == "%b %Y"

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("FINANCE_LOAD_SEED_DATA", "false")
        monkeypatch.setenv("FINANCE_LOG_LEVEL", "debug")
        settings = AppSettings(_env_file=None)
        assert settings.load_seed_data is False
        assert settings.log_level == "DEBUG"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, log_level="LOUD")

    def test_month_key_format_needs_month(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, month_key_format="%Y")

    def test_description_limit_cannot_exceed_model_bound(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, max_description_length=200)
        assert AppSettings(_env_file=None, max_description_length=50).max_description_length == 50

    def test_debug_mode_forces_debug_logging(self):
        assert AppSettings(_env_file=None, log_level="WARNING").effective_log_level == "WARNING"
        settings = AppSettings(_env_file=None, log_level="WARNING", debug_mode=True)
        assert settings.effective_log_level == "DEBUG"

    def test_recent_limit_bounds(self):
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, recent_transactions_limit=0)


def test_validate_all_settings_reports_broken_section(monkeypatch):
    monkeypatch.setenv("FINANCE_RECENT_TRANSACTIONS_LIMIT", "not-a-number")
    results = validate_all_settings(Settings(_env_file=None))
    assert results["app"] is False
    assert "app_error" in results
