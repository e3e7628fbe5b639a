# src/persevere/core/config.py
"""
Configuration schema and loading for retry runs.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.

Settings validate fail-fast (pydantic ValidationError). The chained
Retryable builder is the accumulate-every-error path; both end in the same
RetryPolicy.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from persevere.contracts.config import POLICY_DEFAULTS


class RetrySettings(BaseModel):
    """Retry behavior configuration.

    Example YAML:
        retry:
          max_attempts: 5
          max_delay_seconds: 30
          wait_random_min_seconds: 0.5
          wait_random_max_seconds: 2.0
    """

    model_config = {"frozen": True}

    max_attempts: int = Field(
        default=int(POLICY_DEFAULTS["max_attempts"]),
        gt=0,
        description="Total invocations before giving up",
    )
    max_delay_seconds: float | None = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Overall deadline for the run",
    )
    wait_fixed_seconds: float | None = Field(
        default=None,
        gt=0,
        allow_inf_nan=False,
        description="Fixed delay between attempts",
    )
    wait_random_min_seconds: float | None = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Lower bound of random delay",
    )
    wait_random_max_seconds: float | None = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Upper bound of random delay",
    )

    @model_validator(mode="after")
    def validate_random_bounds(self) -> "RetrySettings":
        """Random bounds come as a pair with min < max."""
        minimum = self.wait_random_min_seconds
        maximum = self.wait_random_max_seconds
        if (minimum is None) != (maximum is None):
            raise ValueError("wait_random_min_seconds and wait_random_max_seconds must be set together")
        if minimum is not None and maximum is not None and minimum >= maximum:
            raise ValueError(
                f"wait_random_min_seconds ({minimum}) must be smaller than wait_random_max_seconds ({maximum})"
            )
        return self


class DiagnosticsSettings(BaseModel):
    """Trace capture on abnormal termination."""

    model_config = {"frozen": True}

    buffer_size: int = Field(
        default=int(POLICY_DEFAULTS["diagnostic_buffer_size"]),
        gt=0,
        description="Maximum bytes of trace text kept per failure",
    )
    all_threads: bool = Field(
        default=bool(POLICY_DEFAULTS["capture_all_threads"]),
        description="Capture stacks of every running thread, not just the failing one",
    )


class LoggingSettings(BaseModel):
    """Structured logging output."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO", description="Root log level")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")


class PersevereSettings(BaseModel):
    """Top-level configuration.

    Every section is optional; an empty file yields a single-attempt policy
    with default diagnostics and INFO console logging.
    """

    model_config = {"frozen": True}

    retry: RetrySettings = Field(default_factory=RetrySettings, description="Retry policy")
    diagnostics: DiagnosticsSettings = Field(default_factory=DiagnosticsSettings, description="Trace capture")
    logging: LoggingSettings = Field(default_factory=LoggingSettings, description="Log output")


def load_settings(config_path: Path) -> PersevereSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (PERSEVERE_*) - highest priority
    2. Config file (settings.yaml)
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: PERSEVERE_RETRY__MAX_ATTEMPTS for nested keys.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated PersevereSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Explicit check for file existence (Dynaconf silently accepts missing files)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="PERSEVERE",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return PersevereSettings(**raw_config)
