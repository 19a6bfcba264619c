"""Tests for settings and display formatting."""

import pytest

from pydantic import ValidationError

from invertrack.config import (
    AppSettings,
    GeminiSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from invertrack.formatting import format_currency, format_percent


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch, tmp_path):
    """Isolate tests from a developer's .env and environment."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "GEMINI_API_KEY",
        "GEMINI_MODEL_NAME",
        "DEFAULT_HORIZON_DAYS",
        "CURRENCY_SYMBOL",
        "INVERTRACK_STORAGE_STORAGE_KEY",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for pydantic-settings configuration."""

    def test_gemini_requires_api_key(self):
        with pytest.raises(ValidationError):
            GeminiSettings()

    def test_gemini_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-test")
        settings = GeminiSettings()
        assert settings.api_key == "test-key"
        assert settings.model_name == "gemini-test"

    def test_storage_defaults(self):
        settings = StorageSettings()
        assert settings.storage_key == "invertrack_portfolio"
        assert settings.path.name == "storage.json"

    def test_storage_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("INVERTRACK_STORAGE_STORAGE_KEY", "custom")
        assert StorageSettings().storage_key == "custom"

    def test_default_horizon_must_be_an_option(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_HORIZON_DAYS", "10")
        with pytest.raises(ValidationError):
            AppSettings()

    def test_default_horizon_accepts_option(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_HORIZON_DAYS", "90")
        assert AppSettings().default_horizon_days == 90

    def test_validate_all_settings_reports_missing_gemini(self):
        status = validate_all_settings()
        assert status["gemini"] is False
        assert "gemini_error" in status
        assert status["storage"] is True
        assert status["app"] is True

    def test_gemini_reads_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text("GEMINI_API_KEY=abc\n", encoding="utf-8")
        assert GeminiSettings().api_key == "abc"

    def test_storage_reads_dotenv(self, tmp_path):
        (tmp_path / ".env").write_text(
            "INVERTRACK_STORAGE_STORAGE_KEY=from_file\n", encoding="utf-8"
        )
        assert StorageSettings().storage_key == "from_file"

    def test_environment_overrides_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("GEMINI_API_KEY=abc\n", encoding="utf-8")
        monkeypatch.setenv("GEMINI_API_KEY", "from-env")
        assert GeminiSettings().api_key == "from-env"


class TestFormatting:
    """Tests for display-time formatting."""

    def test_currency(self):
        assert format_currency(2230450.09) == "$2,230,450.09"
        assert format_currency(0) == "$0.00"

    def test_negative_currency(self):
        assert format_currency(-1500.5) == "-$1,500.50"

    def test_tiny_negative_rounds_to_zero(self):
        assert format_currency(-0.001) == "$0.00"

    def test_custom_symbol(self):
        assert format_currency(12.3, "€") == "€12.30"

    def test_percent(self):
        assert format_percent(11.756) == "11.76%"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
