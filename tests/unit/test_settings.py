"""
Unit tests for configuration settings.
"""

import pytest
from pydantic import ValidationError

from campus_board.config import Settings, get_settings


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self, monkeypatch):
        for name in ("API_BASE_URL", "STORAGE_BACKEND", "PAGE_SIZE", "SEED_SAMPLES"):
            monkeypatch.delenv(f"CAMPUS_BOARD_{name}", raising=False)

        settings = Settings(_env_file=None)

        assert settings.api_base_url == "http://localhost:5000"
        assert settings.storage_backend == "sqlite"
        assert settings.page_size == 50
        assert settings.seed_samples is True
        assert settings.anonymous_user_id == "anonymous"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("CAMPUS_BOARD_API_BASE_URL", "https://campus.example.edu")
        monkeypatch.setenv("campus_board_storage_backend", "memory")
        monkeypatch.setenv("CAMPUS_BOARD_REFRESH_AFTER_WRITE", "false")

        settings = Settings(_env_file=None)

        assert settings.api_base_url == "https://campus.example.edu"
        assert settings.storage_backend == "memory"
        assert settings.refresh_after_write is False

    def test_rejects_unknown_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, storage_backend="redis")

    def test_rejects_negative_retries(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, api_max_retries=-1)

    def test_get_settings_is_cached(self):
        get_settings.cache_clear()

        assert get_settings() is get_settings()
        get_settings.cache_clear()
