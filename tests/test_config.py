"""Tests for configuration loading."""

import pytest
from pathlib import Path
from pydantic import ValidationError

from mtext_bridge import config
from mtext_bridge.config import Settings, get_settings, load_settings


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self, settings: Settings):
        """Test the documented defaults."""
        assert settings.default_font == "Arial"
        assert settings.tracking_marker_class == "letterspacing"
        assert settings.default_tracking == 10
        assert settings.width_marker_class == "letterwidth"
        assert settings.default_width == 1
        assert settings.base_font_px == 16
        assert settings.px_per_pt == 1.33
        assert settings.html_parser == "html.parser"

    def test_environment_override(self, monkeypatch):
        """Test variables are read by their MTEXT_ names."""
        monkeypatch.setenv("MTEXT_DEFAULT_FONT", "Verdana")
        monkeypatch.setenv("MTEXT_BASE_FONT_PX", "12")

        settings = Settings(_env_file=None)

        assert settings.default_font == "Verdana"
        assert settings.base_font_px == 12

    def test_env_file(self, tmp_path: Path, monkeypatch):
        """Test loading from a specific .env file."""
        monkeypatch.delenv("MTEXT_DEFAULT_TRACKING", raising=False)
        env_file = tmp_path / "custom.env"
        env_file.write_text("MTEXT_DEFAULT_TRACKING=4\n", encoding="utf-8")

        settings = Settings(_env_file=env_file)

        assert settings.default_tracking == 4

    def test_rejects_zero_base_size(self, monkeypatch):
        """Test unit conversion values must be positive."""
        monkeypatch.setenv("MTEXT_BASE_FONT_PX", "0")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


    def test_log_level_case_insensitive(self, monkeypatch):
        """Test level names are normalized to upper case."""
        monkeypatch.setenv("MTEXT_LOG_LEVEL", " info ")

        assert Settings(_env_file=None).log_level == "INFO"

    def test_rejects_unknown_log_level(self, monkeypatch):
        """Test an unknown level fails validation instead of at logging setup."""
        monkeypatch.setenv("MTEXT_LOG_LEVEL", "LOUD")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestGlobalSettings:
    """Tests for the shared settings instance."""

    @pytest.fixture(autouse=True)
    def reset_global(self, monkeypatch):
        monkeypatch.setattr(config, "_settings", None)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_load_settings_replaces_global(self, tmp_path: Path, monkeypatch):
        """Test load_settings swaps the shared instance."""
        monkeypatch.delenv("MTEXT_DEFAULT_FONT", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("MTEXT_DEFAULT_FONT=Courier\n", encoding="utf-8")

        loaded = load_settings(env_file)

        assert loaded.default_font == "Courier"
        assert get_settings() is loaded
