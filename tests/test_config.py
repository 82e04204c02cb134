"""Tests für das Konfigurationssystem."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config.defaults import DAY_NAMES, DEFAULT_PERIOD_COUNT, default_app_config
from config.manager import ConfigManager
from config.schema import (
    AppConfig,
    BackendConfig,
    BackendKind,
    LayoutDefaults,
    LoggingConfig,
)


# ─── SCHEMA ───────────────────────────────────────────────────────────────────

class TestSchema:
    def test_default_config_valid(self):
        """Default-Config: lokale Datei, 8 Stunden, Mo–Sa."""
        config = default_app_config()
        assert config.backend.kind == BackendKind.LOCAL
        assert config.layout.default_period_count == DEFAULT_PERIOD_COUNT
        assert config.layout.day_names == DAY_NAMES
        assert config.logging.level == "INFO"

    def test_overrides(self):
        config = default_app_config(school_name="Gesamtschule Nord")
        assert config.school_name == "Gesamtschule Nord"

    def test_day_names_must_be_six(self):
        with pytest.raises(ValidationError):
            LayoutDefaults(day_names=["Mo", "Di", "Mi", "Do", "Fr"])

    def test_period_count_minimum(self):
        with pytest.raises(ValidationError):
            LayoutDefaults(default_period_count=0)

    def test_timeout_bounds(self):
        with pytest.raises(ValidationError):
            BackendConfig(timeout_seconds=0)
        with pytest.raises(ValidationError):
            BackendConfig(timeout_seconds=500)

    def test_log_level_normalized(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError):
            LoggingConfig(level="laut")


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Config speichern und wieder laden ergibt dasselbe Objekt."""
        config = default_app_config(
            backend=BackendConfig(kind=BackendKind.HTTP, base_url="https://schule.test/api"),
        )
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "app_config.yaml"
        mgr.save(config)
        assert mgr.DEFAULT_CONFIG.exists()

        loaded = mgr.load()
        assert loaded == config
        assert loaded.backend.kind == BackendKind.HTTP

    def test_saved_file_has_comments(self, tmp_path: Path):
        mgr = ConfigManager()
        target = tmp_path / "app_config.yaml"
        mgr.save(default_app_config(), target)
        text = target.read_text(encoding="utf-8")
        assert text.startswith("# ====")
        assert "─── Datenquelle ───" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "app_config.yaml"
        mgr.save(AppConfig())
        assert mgr.first_run_check() is False

    def test_load_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            ConfigManager().load(tmp_path / "fehlt.yaml")

    def test_load_invalid_file(self, tmp_path: Path):
        target = tmp_path / "app_config.yaml"
        target.write_text("layout:\n  default_period_count: 0\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(target)
