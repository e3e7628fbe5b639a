# tests/core/test_config.py
"""Tests for settings models and load_settings()."""

from pathlib import Path

import pytest
from pydantic import ValidationError


class TestRetrySettings:
    """Retry configuration validation."""

    def test_defaults(self) -> None:
        from persevere.core.config import RetrySettings

        settings = RetrySettings()
        assert settings.max_attempts == 1
        assert settings.max_delay_seconds is None
        assert settings.wait_fixed_seconds is None

    def test_max_attempts_must_be_positive(self) -> None:
        from persevere.core.config import RetrySettings

        with pytest.raises(ValidationError):
            RetrySettings(max_attempts=0)

    def test_delays_must_be_positive(self) -> None:
        from persevere.core.config import RetrySettings

        with pytest.raises(ValidationError):
            RetrySettings(max_delay_seconds=0)
        with pytest.raises(ValidationError):
            RetrySettings(wait_fixed_seconds=-1.0)

    @pytest.mark.parametrize("value", [float("inf"), float("nan")])
    @pytest.mark.parametrize(
        "field",
        ["max_delay_seconds", "wait_fixed_seconds", "wait_random_min_seconds", "wait_random_max_seconds"],
    )
    def test_delays_must_be_finite(self, field: str, value: float) -> None:
        from persevere.core.config import RetrySettings

        with pytest.raises(ValidationError):
            RetrySettings(**{field: value})

    def test_random_bounds_must_be_ordered(self) -> None:
        from persevere.core.config import RetrySettings

        with pytest.raises(ValidationError, match="must be smaller than"):
            RetrySettings(wait_random_min_seconds=2.0, wait_random_max_seconds=1.0)

    def test_random_bounds_must_be_paired(self) -> None:
        from persevere.core.config import RetrySettings

        with pytest.raises(ValidationError, match="set together"):
            RetrySettings(wait_random_max_seconds=1.0)

    def test_settings_are_frozen(self) -> None:
        from persevere.core.config import RetrySettings

        settings = RetrySettings()
        with pytest.raises(ValidationError):
            settings.max_attempts = 5  # type: ignore[misc]


class TestPersevereSettings:
    def test_all_sections_optional(self) -> None:
        from persevere.core.config import PersevereSettings

        settings = PersevereSettings()
        assert settings.retry.max_attempts == 1
        assert settings.diagnostics.buffer_size == 4096
        assert settings.logging.level == "INFO"

    def test_nested_config(self) -> None:
        from persevere.core.config import PersevereSettings

        settings = PersevereSettings(
            retry={"max_attempts": 3, "wait_fixed_seconds": 0.25},
            diagnostics={"buffer_size": 512, "all_threads": True},
        )
        assert settings.retry.wait_fixed_seconds == 0.25
        assert settings.diagnostics.all_threads is True

    def test_invalid_log_level_rejected(self) -> None:
        from persevere.core.config import PersevereSettings

        with pytest.raises(ValidationError):
            PersevereSettings(logging={"level": "VERBOSE"})


class TestLoadSettings:
    def test_load_from_yaml(self, tmp_path: Path) -> None:
        from persevere.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
retry:
  max_attempts: 5
  max_delay_seconds: 30
  wait_random_min_seconds: 0.5
  wait_random_max_seconds: 2.0
diagnostics:
  buffer_size: 1024
""")
        settings = load_settings(config_file)
        assert settings.retry.max_attempts == 5
        assert settings.retry.max_delay_seconds == 30
        assert settings.retry.wait_random_max_seconds == 2.0
        assert settings.diagnostics.buffer_size == 1024

    def test_load_with_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        from persevere.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
retry:
  max_attempts: 2
""")
        # Environment variable should override YAML
        monkeypatch.setenv("PERSEVERE_RETRY__MAX_ATTEMPTS", "7")

        settings = load_settings(config_file)
        assert settings.retry.max_attempts == 7

    def test_load_validates_schema(self, tmp_path: Path) -> None:
        from persevere.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
retry:
  max_attempts: -1
""")
        with pytest.raises(ValidationError):
            load_settings(config_file)

    def test_load_rejects_infinite_deadline(self, tmp_path: Path) -> None:
        from persevere.core.config import load_settings

        config_file = tmp_path / "settings.yaml"
        config_file.write_text("""
retry:
  max_delay_seconds: .inf
""")
        with pytest.raises(ValidationError):
            load_settings(config_file)

    def test_load_missing_file_raises_file_not_found(self, tmp_path: Path) -> None:
        from persevere.core.config import load_settings

        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(tmp_path / "missing.yaml")
