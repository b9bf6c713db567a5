"""
Tests for configuration
"""

import pytest
from pathlib import Path

from spliteasy.config import (
    AppSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from spliteasy.editing import BillEditError, add_person, create_sample_state


class TestSettings:
    """Tests for the pydantic-settings classes."""

    def test_storage_defaults(self, monkeypatch):
        monkeypatch.delenv("SPLITEASY_STORAGE_PATH", raising=False)
        monkeypatch.delenv("SPLITEASY_STORAGE_MAX_STORED_SPLITS", raising=False)
        settings = StorageSettings()

        assert settings.max_stored_splits == 10
        assert settings.resolved_path == Path.home() / ".spliteasy" / "recent_splits.json"

    def test_storage_env_override(self, monkeypatch):
        monkeypatch.setenv("SPLITEASY_STORAGE_MAX_STORED_SPLITS", "25")
        assert StorageSettings().max_stored_splits == 25

    def test_log_level_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert AppSettings().log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        with pytest.raises(ValueError):
            AppSettings()

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()

    def test_validate_all_settings(self):
        assert validate_all_settings() == {"storage": True, "app": True}

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "verbose")
        results = validate_all_settings()

        assert results["storage"] is True
        assert results["app"] is False
        assert "Unsupported log level" in results["app_error"]

    def test_name_limit_applies_to_editing(self, monkeypatch):
        monkeypatch.setenv("MAX_PERSON_NAME_LENGTH", "5")

        with pytest.raises(BillEditError, match=r"max 5 characters"):
            add_person(create_sample_state(), "Bartholomew")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
