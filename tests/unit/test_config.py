"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from things_mcp.config import Settings, load_settings
from things_mcp.errors import ConfigurationError


class TestSettings:
    """Tests for Settings defaults and validation."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.application == "Things3"
        assert settings.osascript_path == "osascript"
        assert settings.timeout_seconds == 30.0
        assert settings.log_level == "WARNING"

    def test_log_level_is_normalized(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"


class TestLoadSettings:
    """Tests for load_settings."""

    def test_no_file(self) -> None:
        assert load_settings() == Settings()

    def test_yaml_file(self, tmp_path: Path) -> None:
        config = tmp_path / "things.yaml"
        config.write_text("timeout_seconds: 12\napplication: Things3 Beta\n")

        settings = load_settings(config)

        assert settings.timeout_seconds == 12
        assert settings.application == "Things3 Beta"

    def test_overrides_win(self, tmp_path: Path) -> None:
        config = tmp_path / "things.yaml"
        config.write_text("timeout_seconds: 12\nlog_level: info\n")

        settings = load_settings(config, timeout_seconds=3, log_level=None)

        assert settings.timeout_seconds == 3
        assert settings.log_level == "INFO"

    def test_empty_file(self, tmp_path: Path) -> None:
        config = tmp_path / "things.yaml"
        config.write_text("")
        assert load_settings(config) == Settings()

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="Cannot read config file"):
            load_settings(tmp_path / "absent.yaml")

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        config = tmp_path / "things.yaml"
        config.write_text("- one\n- two\n")
        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            load_settings(config)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "things.yaml"
        config.write_text("timeout_seconds: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Cannot read config file"):
            load_settings(config)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"timeout_seconds": 0},
            {"log_level": "LOUD"},
            {"unknown_key": True},
        ],
    )
    def test_invalid_values(self, overrides: dict[str, object]) -> None:
        with pytest.raises(ConfigurationError, match="Invalid settings"):
            load_settings(**overrides)
