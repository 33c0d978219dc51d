"""
Unit Tests: Settings

Tests for settings sources, precedence and directory bootstrap.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from config_server.config.settings import (
    MonitoringSettings,
    Settings,
    StorageSettings,
    get_settings,
    prepare_directories,
    reload_settings,
)
from config_server.data.storage import ResourceKind
from config_server.utils.config import load_config


@pytest.fixture
def clean_env(monkeypatch, temp_dir: Path):
    """Point the config file at an empty location and clear overrides."""
    for name in (
        "DATA_DIR",
        "LOG_LEVEL",
        "CONFIG_SERVER_HOST",
        "CONFIG_SERVER_PORT",
        "CONFIG_SERVER_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CONFIG_SERVER_CONFIG_FILE", str(temp_dir / "absent.toml"))
    reload_settings()
    return monkeypatch


@pytest.mark.unit
class TestDefaults:
    """Test default values."""

    def test_defaults(self, clean_env):
        settings = get_settings()

        assert settings.environment == "test"
        assert settings.storage.data_dir == Path("data")
        assert settings.server.bind_port == 24025
        assert settings.monitoring.log_retention_count == 10
        assert settings.monitoring.log_base_name == "server"
        assert settings.subdirectories == {
            ResourceKind.JSON: "configs",
            ResourceKind.TEXT: "texts",
        }
        assert settings.log_dir == Path("data") / "logs"

    def test_cached(self, clean_env):
        assert get_settings() is get_settings()


@pytest.mark.unit
class TestSources:
    """Test TOML and environment sources."""

    def test_environment_overrides(self, clean_env, temp_dir: Path):
        clean_env.setenv("DATA_DIR", str(temp_dir))
        clean_env.setenv("LOG_LEVEL", "Warning")
        clean_env.setenv("CONFIG_SERVER_PORT", "8080")

        settings = reload_settings()

        assert settings.storage.data_dir == temp_dir
        assert settings.monitoring.log_level == "Warning"
        assert settings.server.bind_port == 8080

    def test_toml_file(self, clean_env, temp_dir: Path):
        config_file = temp_dir / "server.toml"
        config_file.write_text(
            '[storage]\n'
            'data_dir = "/srv/data"\n'
            'text_subdir = "notes"\n'
            '\n'
            '[monitoring]\n'
            'log_retention_count = 14\n'
        )
        clean_env.setenv("CONFIG_SERVER_CONFIG_FILE", str(config_file))

        settings = reload_settings()

        assert settings.storage.data_dir == Path("/srv/data")
        assert settings.storage.text_subdir == "notes"
        assert settings.monitoring.log_retention_count == 14

    def test_environment_beats_toml(self, clean_env, temp_dir: Path):
        config_file = temp_dir / "server.toml"
        config_file.write_text('[storage]\ndata_dir = "/from/toml"\n')
        clean_env.setenv("CONFIG_SERVER_CONFIG_FILE", str(config_file))
        clean_env.setenv("DATA_DIR", "/from/env")

        assert reload_settings().storage.data_dir == Path("/from/env")

    def test_missing_toml_is_empty(self, temp_dir: Path):
        assert load_config(temp_dir / "nope.toml") == {}

    def test_invalid_toml(self, temp_dir: Path):
        config_file = temp_dir / "broken.toml"
        config_file.write_text("[storage\n")

        with pytest.raises(ValueError):
            load_config(config_file)


@pytest.mark.unit
class TestValidation:
    """Test schema validation."""

    def test_retention_must_be_positive(self):
        with pytest.raises(ValidationError):
            MonitoringSettings(log_retention_count=0)

    def test_log_format(self):
        with pytest.raises(ValidationError):
            MonitoringSettings(log_format="xml")

    def test_environment(self):
        with pytest.raises(ValidationError):
            Settings(environment="staging")


@pytest.mark.unit
class TestPrepareDirectories:
    """Test directory bootstrap."""

    def test_creates_subdirectories(self, data_dir: Path):
        settings = Settings(storage=StorageSettings(data_dir=data_dir))

        prepare_directories(settings)

        assert sorted(p.name for p in data_dir.iterdir()) == ["configs", "logs", "texts"]

    def test_missing_data_dir(self, temp_dir: Path):
        settings = Settings(storage=StorageSettings(data_dir=temp_dir / "missing"))

        with pytest.raises(FileNotFoundError):
            prepare_directories(settings)

        assert not (temp_dir / "missing").exists()
