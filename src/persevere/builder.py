# src/persevere/builder.py
"""Retryable: chained configuration that collects every mistake before running.

Each setter validates its own field and records a PolicyViolation instead of
raising, so a caller sees all configuration problems at once. run() refuses
to invoke the operation while any violation is recorded.

Example:
    result = (
        Retryable()
        .max_attempt_times(5)
        .wait_random(0.1, 0.5)
        .max_delay(10.0)
        .function(fetch_status)
        .run()
    )
    result.raise_for_error()
"""

import inspect
from typing import TYPE_CHECKING

from persevere.contracts.config import (
    POLICY_DEFAULTS,
    RetryPolicy,
    check_buffer_size,
    check_max_attempts,
    check_positive_duration,
    check_random_bounds,
)
from persevere.contracts.errors import (
    ConfigurationInvalid,
    InvalidOperation,
    NoFunctionSpecified,
    PolicyViolation,
)
from persevere.contracts.results import RunResult
from persevere.core.logging import get_logger
from persevere.engine.recovery import Operation
from persevere.engine.retry import RetryEngine

if TYPE_CHECKING:
    from persevere.core.config import PersevereSettings

logger = get_logger(__name__)

_REQUIRED_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def _operation_violations(operation: object) -> list[PolicyViolation]:
    """Check that operation can be called with no arguments.

    Return values are not checked: returning an exception instance is a
    failure, anything else is a success.
    """
    if not callable(operation):
        return [InvalidOperation(f"expected a callable but got {type(operation).__name__}")]

    # Calling these only builds a coroutine or generator; the body never runs
    if inspect.iscoroutinefunction(operation) or inspect.isasyncgenfunction(operation):
        return [InvalidOperation("expected a synchronous function but got an async function")]
    if inspect.isgeneratorfunction(operation):
        return [InvalidOperation("expected a plain function but got a generator function")]

    try:
        signature = inspect.signature(operation)
    except (TypeError, ValueError):
        # Some builtins expose no signature; let the first call decide
        return []

    violations: list[PolicyViolation] = []
    required = [
        p for p in signature.parameters.values() if p.kind in _REQUIRED_KINDS and p.default is inspect.Parameter.empty
    ]
    if required:
        violations.append(InvalidOperation(f"expected 0 inputs but got {len(required)}"))
    return violations


class Retryable:
    """Builder for a single retry run.

    Defaults: one attempt, no waits, no deadline, 4096-byte trace of the
    failing thread only, no operation bound.
    """

    def __init__(self, *, engine: RetryEngine | None = None) -> None:
        self._engine = engine if engine is not None else RetryEngine()

        self._max_attempts = int(POLICY_DEFAULTS["max_attempts"])
        self._max_delay: float | None = None
        self._wait_fixed: float | None = None
        self._wait_random_min: float | None = None
        self._wait_random_max: float | None = None
        self._buffer_size = int(POLICY_DEFAULTS["diagnostic_buffer_size"])
        self._all_threads = bool(POLICY_DEFAULTS["capture_all_threads"])

        self._operation: Operation | None = None
        self._violations: list[PolicyViolation] = []

    @classmethod
    def from_settings(cls, settings: "PersevereSettings", *, engine: RetryEngine | None = None) -> "Retryable":
        """Seed every option from validated settings."""
        retryable = cls(engine=engine)
        retry = settings.retry
        retryable.max_attempt_times(retry.max_attempts)
        retryable.stack(settings.diagnostics.buffer_size, settings.diagnostics.all_threads)
        if retry.max_delay_seconds is not None:
            retryable.max_delay(retry.max_delay_seconds)
        if retry.wait_fixed_seconds is not None:
            retryable.wait_fixed(retry.wait_fixed_seconds)
        if retry.wait_random_min_seconds is not None and retry.wait_random_max_seconds is not None:
            retryable.wait_random(retry.wait_random_min_seconds, retry.wait_random_max_seconds)
        return retryable

    @property
    def violations(self) -> tuple[PolicyViolation, ...]:
        """Violations recorded so far, in call order."""
        return tuple(self._violations)

    def stack(self, size: int, all_threads: bool = False) -> "Retryable":
        """Set trace capture: buffer size in bytes, and whether to dump every thread."""
        self._violations.extend(check_buffer_size(size))
        self._buffer_size = size
        self._all_threads = all_threads
        return self

    def max_attempt_times(self, n: int) -> "Retryable":
        self._violations.extend(check_max_attempts(n))
        self._max_attempts = n
        return self

    def max_delay(self, seconds: float) -> "Retryable":
        """Bound the whole run by a deadline."""
        self._violations.extend(check_positive_duration("max_delay", seconds))
        self._max_delay = seconds
        return self

    def wait_fixed(self, seconds: float) -> "Retryable":
        self._violations.extend(check_positive_duration("wait_fixed", seconds))
        self._wait_fixed = seconds
        return self

    def wait_random(self, min_seconds: float, max_seconds: float) -> "Retryable":
        """Wait a uniform random delay in [min_seconds, max_seconds) between attempts."""
        self._violations.extend(check_random_bounds(min_seconds, max_seconds))
        self._wait_random_min, self._wait_random_max = min_seconds, max_seconds
        return self

    def function(self, operation: Operation) -> "Retryable":
        """Bind the zero-argument operation to retry.

        The operation fails by raising or by returning an exception
        instance; any other return value is a success.
        """
        self._violations.extend(_operation_violations(operation))
        if callable(operation):
            self._operation = operation
        return self

    def build(self) -> RetryPolicy:
        """Finalize the policy.

        Raises:
            ConfigurationInvalid: If any setter recorded a violation
        """
        if self._violations:
            raise ConfigurationInvalid(self._violations)
        return RetryPolicy(
            max_attempts=self._max_attempts,
            max_delay=self._max_delay,
            wait_fixed=self._wait_fixed,
            wait_random_min=self._wait_random_min,
            wait_random_max=self._wait_random_max,
            diagnostic_buffer_size=self._buffer_size,
            capture_all_threads=self._all_threads,
        )

    def run(self) -> RunResult:
        """Run the bound operation with retries.

        Returns:
            RunResult. CONFIGURATION_INVALID is returned without invoking the
            operation whenever a violation was recorded or nothing was bound.
        """
        violations = list(self._violations)
        if self._operation is None and not any(v.field == "function" for v in violations):
            violations.append(NoFunctionSpecified())

        if violations:
            logger.warning("configuration_invalid", errors=[str(v) for v in violations])
            return RunResult.configuration_invalid(violations)

        assert self._operation is not None
        return self._engine.call(self.build(), self._operation)
