"""
Tests for settings management module.
"""

import json
import sys
from unittest.mock import patch

from tfprof_viewer.utils import settings
from tfprof_viewer.utils.settings import Settings, get_settings, save_settings


class TestSettings:
    """Tests for Settings dataclass"""

    def test_default_values(self):
        """Settings should have correct default values"""
        s = Settings()
        assert s.width == 1200
        assert s.max_line_height == 20
        assert (s.left_margin, s.right_margin) == (100, 100)
        assert s.viewport_epsilon == sys.float_info.epsilon
        assert s.min_segment_duration == 0.0

    def test_custom_values(self):
        """Settings can be initialized with custom values"""
        s = Settings(width=800, viewport_epsilon=1e-6)
        assert s.width == 800
        assert s.viewport_epsilon == 1e-6


class TestSettingsSave:
    """Tests for Settings.save() method"""

    def test_save_creates_directory_and_writes_file(self, isolated_settings):
        """save() should create config directory and write JSON file"""
        Settings(width=900).save()

        assert isolated_settings.exists()
        data = json.loads(isolated_settings.read_text())
        assert data["width"] == 900
        assert "viewport_epsilon" in data

    def test_save_to_explicit_path(self, tmp_path):
        path = tmp_path / "custom" / "viewer.json"
        Settings(bar_height=500).save(str(path))
        assert json.loads(path.read_text())["bar_height"] == 500


class TestSettingsLoad:
    """Tests for Settings.load() class method"""

    def test_load_returns_defaults_when_file_missing(self):
        """load() should return default settings when config file doesn't exist"""
        assert Settings.load() == Settings()

    def test_load_round_trips_saved_values(self):
        Settings(width=640, min_label_font=3.0).save()
        loaded = Settings.load()
        assert loaded.width == 640
        assert loaded.min_label_font == 3.0

    def test_load_ignores_unknown_fields(self, isolated_settings):
        """Obsolete keys in the file are dropped"""
        isolated_settings.parent.mkdir(parents=True)
        isolated_settings.write_text(json.dumps({"width": 700, "legacy_flag": True}))
        assert Settings.load().width == 700

    def test_load_invalid_json_returns_defaults(self, isolated_settings):
        """Unreadable files fall back to defaults with a warning"""
        isolated_settings.parent.mkdir(parents=True)
        isolated_settings.write_text("{not json")

        with patch("tfprof_viewer.utils.logger.warning") as mock_warning:
            assert Settings.load() == Settings()
        mock_warning.assert_called_once()

    def test_load_non_object_returns_defaults(self, isolated_settings):
        isolated_settings.parent.mkdir(parents=True)
        isolated_settings.write_text("[1, 2, 3]")
        assert Settings.load() == Settings()


class TestGlobalSettings:
    """Tests for get_settings() and save_settings()"""

    def test_get_settings_is_cached(self):
        first = get_settings()
        assert get_settings() is first

    def test_get_settings_loads_file(self):
        Settings(width=1000).save()
        assert get_settings().width == 1000

    def test_save_settings_writes_global_instance(self, isolated_settings):
        get_settings().width = 1500
        save_settings()
        assert json.loads(isolated_settings.read_text())["width"] == 1500

    def test_save_settings_without_instance_is_noop(self, isolated_settings):
        assert settings._settings is None
        save_settings()
        assert not isolated_settings.exists()
