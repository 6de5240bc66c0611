# tests/core/test_config.py
"""Tests for engine settings and loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestEngineSettings:
    """Engine settings validation."""

    def test_defaults(self) -> None:
        from plugopts.core.config import EngineSettings

        settings = EngineSettings()
        assert settings.external_timeout_seconds is None
        assert settings.max_concurrent_external_checks is None

    def test_timeout_must_be_positive(self) -> None:
        from plugopts.core.config import EngineSettings

        with pytest.raises(ValidationError):
            EngineSettings(external_timeout_seconds=0)

    def test_concurrency_must_be_positive(self) -> None:
        from plugopts.core.config import EngineSettings

        with pytest.raises(ValidationError):
            EngineSettings(max_concurrent_external_checks=0)

    def test_settings_are_frozen(self) -> None:
        from plugopts.core.config import EngineSettings

        settings = EngineSettings(external_timeout_seconds=5)
        with pytest.raises(ValidationError):
            settings.external_timeout_seconds = 10  # type: ignore[misc]


class TestLoadSettings:
    """Loading settings from YAML with environment overrides."""

    def test_load_from_yaml_file(self, tmp_path: Path) -> None:
        from plugopts.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
external_timeout_seconds: 2.5
max_concurrent_external_checks: 4
""")
        settings = load_settings(config_file)
        assert settings.external_timeout_seconds == 2.5
        assert settings.max_concurrent_external_checks == 4

    def test_load_with_env_override(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from plugopts.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("external_timeout_seconds: 2.5\n")
        # Environment variable should override YAML
        monkeypatch.setenv("PLUGOPTS_EXTERNAL_TIMEOUT_SECONDS", "7")

        settings = load_settings(config_file)
        assert settings.external_timeout_seconds == 7

    def test_load_validates_schema(self, tmp_path: Path) -> None:
        from plugopts.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("external_timeout_seconds: -1\n")
        with pytest.raises(ValidationError):
            load_settings(config_file)

    def test_load_missing_file_raises_file_not_found(self, tmp_path: Path) -> None:
        from plugopts.core.config import load_settings

        missing_file = tmp_path / "nonexistent.yaml"
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(missing_file)
