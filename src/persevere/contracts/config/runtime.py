# src/persevere/contracts/config/runtime.py
"""RetryPolicy: the validated, immutable configuration consumed by the engine.

Design Principles:
1. Frozen (immutable) - the engine never mutates a policy mid-run
2. Slots - prevents attribute typos
3. Validate everything, then fail once - construction collects every
   violation and raises a single ConfigurationInvalid
4. Factory methods - default(), from_settings()

The check_* helpers are shared with the Retryable builder so that a chained
setter and a direct RetryPolicy(...) call report identical violations.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from persevere.contracts.config.defaults import POLICY_DEFAULTS
from persevere.contracts.errors import ConfigurationInvalid, PolicyViolation

if TYPE_CHECKING:
    from persevere.core.config import DiagnosticsSettings, RetrySettings


def check_max_attempts(value: int) -> list[PolicyViolation]:
    """Attempt count must be a positive integer."""
    if value <= 0:
        return [PolicyViolation("max_attempts", "max attempt times must be positive integer")]
    return []


def check_positive_duration(field_name: str, value: float | None) -> list[PolicyViolation]:
    """Optional durations must be finite and strictly positive when set.

    Args:
        field_name: Option name used in the violation (e.g. "max_delay")
        value: Duration in seconds, or None when unset

    Returns:
        Zero or one violation
    """
    if value is not None and (not math.isfinite(value) or value <= 0):
        label = field_name.replace("_", " ")
        return [PolicyViolation(field_name, f"{label} must be positive duration")]
    return []


def check_random_bounds(minimum: float | None, maximum: float | None) -> list[PolicyViolation]:
    """Random wait bounds: both finite and non-negative, and min < max.

    The two rules are reported independently, so (-1, -1) yields two
    violations.
    """
    if minimum is None and maximum is None:
        return []
    if minimum is None or maximum is None:
        return [PolicyViolation("wait_random", "wait random min and max must be set together")]

    violations: list[PolicyViolation] = []
    if not (math.isfinite(minimum) and math.isfinite(maximum)) or minimum < 0 or maximum < 0:
        violations.append(PolicyViolation("wait_random", "wait random min/max must be positive duration"))
    if minimum >= maximum:
        violations.append(PolicyViolation("wait_random", "wait random min must be smaller than max"))
    return violations


def check_buffer_size(value: int) -> list[PolicyViolation]:
    """Diagnostic buffer must hold at least one byte."""
    if value <= 0:
        return [PolicyViolation("diagnostic_buffer_size", "stack size must be positive integer")]
    return []


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Runtime retry policy.

    All durations are seconds. Optional durations use None for "unset".

    Field semantics:
        - max_attempts: TOTAL invocations, not retries (3 means try, retry, retry)
        - max_delay: overall wall-clock budget; None means no deadline
        - wait_fixed: delay between attempts; wins over the random bounds
        - wait_random_min / wait_random_max: uniform delay in [min, max)
        - diagnostic_buffer_size: bytes of trace kept on abnormal termination
        - capture_all_threads: trace every running thread, not just the failing one

    Raises:
        ConfigurationInvalid: On construction, listing every violated field.
    """

    max_attempts: int = int(POLICY_DEFAULTS["max_attempts"])
    max_delay: float | None = None
    wait_fixed: float | None = None
    wait_random_min: float | None = None
    wait_random_max: float | None = None
    diagnostic_buffer_size: int = int(POLICY_DEFAULTS["diagnostic_buffer_size"])
    capture_all_threads: bool = bool(POLICY_DEFAULTS["capture_all_threads"])

    def __post_init__(self) -> None:
        violations = [
            *check_max_attempts(self.max_attempts),
            *check_positive_duration("max_delay", self.max_delay),
            *check_positive_duration("wait_fixed", self.wait_fixed),
            *check_random_bounds(self.wait_random_min, self.wait_random_max),
            *check_buffer_size(self.diagnostic_buffer_size),
        ]
        if violations:
            raise ConfigurationInvalid(violations)

    @property
    def has_deadline(self) -> bool:
        """True when the run is raced against max_delay."""
        return self.max_delay is not None and self.max_delay > 0

    @classmethod
    def default(cls) -> "RetryPolicy":
        """Single attempt, no waits, no deadline."""
        return cls()

    @classmethod
    def from_settings(
        cls,
        retry: "RetrySettings",
        diagnostics: "DiagnosticsSettings | None" = None,
    ) -> "RetryPolicy":
        """Factory from validated settings models.

        Field Mapping:
            retry.max_attempts -> max_attempts
            retry.max_delay_seconds -> max_delay
            retry.wait_fixed_seconds -> wait_fixed
            retry.wait_random_min_seconds -> wait_random_min
            retry.wait_random_max_seconds -> wait_random_max
            diagnostics.buffer_size -> diagnostic_buffer_size
            diagnostics.all_threads -> capture_all_threads

        Args:
            retry: Validated RetrySettings
            diagnostics: Validated DiagnosticsSettings, or None for defaults

        Returns:
            RetryPolicy with mapped values
        """
        if diagnostics is None:
            buffer_size = int(POLICY_DEFAULTS["diagnostic_buffer_size"])
            all_threads = bool(POLICY_DEFAULTS["capture_all_threads"])
        else:
            buffer_size = diagnostics.buffer_size
            all_threads = diagnostics.all_threads

        return cls(
            max_attempts=retry.max_attempts,
            max_delay=retry.max_delay_seconds,
            wait_fixed=retry.wait_fixed_seconds,
            wait_random_min=retry.wait_random_min_seconds,
            wait_random_max=retry.wait_random_max_seconds,
            diagnostic_buffer_size=buffer_size,
            capture_all_threads=all_threads,
        )
