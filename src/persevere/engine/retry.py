# src/persevere/engine/retry.py
"""RetryEngine: attempt orchestration with tenacity.

Two modes, chosen by the policy:

Sequential (no deadline):
    Invoke, and on failure wait per the backoff strategy and invoke again,
    up to max_attempts. Single thread, no concurrency. The wait after the
    final attempt is skipped.

Deadline (max_delay set):
    A producer thread runs the same attempt loop and puts every result on an
    unbounded FIFO queue, one per attempt, in attempt order. The caller's
    thread coordinates: it starts the deadline when the race begins and
    takes results until one succeeds, max_attempts failures have arrived,
    or the deadline elapses. The deadline is checked between results; an
    elapsed deadline wins over a result that is already queued.

Cancellation:
    When the coordinator returns it sets an Event observed by the producer.
    The producer stops before its next attempt and its backoff wait is cut
    short. An attempt already in flight cannot be pre-empted, so the
    producer is a daemon thread and is not joined.

The failure list is owned by the coordinator; the producer only emits.
"""

import queue
import threading
import time
from collections.abc import Callable

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_result,
    stop_after_attempt,
    stop_when_event_set,
)
from tenacity.stop import stop_base

from persevere.contracts.config import RetryPolicy
from persevere.contracts.errors import AbnormalTermination
from persevere.contracts.results import RunResult
from persevere.core.logging import get_logger
from persevere.engine.backoff import backoff_strategy
from persevere.engine.clock import DEFAULT_CLOCK, Clock
from persevere.engine.recovery import Operation, SafeOperation, wrap_operation

logger = get_logger(__name__)

PRODUCER_THREAD_NAME = "persevere-producer"

# Longest single blocking wait the platform accepts; larger durations are clamped
_MAX_WAIT = threading.TIMEOUT_MAX


class _ProducerCancelled(Exception):
    """Raised inside the producer when the coordinator has returned."""


def _is_failure(result: BaseException | None) -> bool:
    return result is not None


def _last_failure(retry_state: RetryCallState) -> BaseException | None:
    """Give up quietly: hand back the final attempt's failure instead of RetryError."""
    assert retry_state.outcome is not None, "retry_error_callback runs after an attempt"
    failure: BaseException | None = retry_state.outcome.result()
    return failure


def _describe(failure: BaseException) -> str:
    """Short form for log events (trace text omitted)."""
    if isinstance(failure, AbnormalTermination):
        failure = failure.payload
    return f"{type(failure).__name__}: {failure}"


def _log_retry_scheduled(retry_state: RetryCallState) -> None:
    assert retry_state.outcome is not None
    delay = retry_state.next_action.sleep if retry_state.next_action is not None else 0.0
    logger.debug(
        "retry_scheduled",
        attempt=retry_state.attempt_number,
        delay=delay,
        error=_describe(retry_state.outcome.result()),
    )


class RetryEngine:
    """Runs a SafeOperation under a RetryPolicy.

    Example:
        engine = RetryEngine()
        policy = RetryPolicy(max_attempts=3, wait_fixed=0.5)

        result = engine.call(policy, lambda: client.ping())
        result.raise_for_error()
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the engine.

        Args:
            clock: Clock used for the overall deadline and elapsed time
                (default: SystemClock)
            sleep: Backoff sleep for sequential mode. Deadline mode always
                waits on its cancellation event instead.
        """
        self._clock = clock if clock is not None else DEFAULT_CLOCK
        self._sleep = sleep

    def call(self, policy: RetryPolicy, operation: Operation) -> RunResult:
        """Wrap a raw operation per the policy's diagnostics settings and run it."""
        safe_operation = wrap_operation(
            operation,
            diagnostic_buffer_size=policy.diagnostic_buffer_size,
            capture_all_threads=policy.capture_all_threads,
        )
        return self.run(policy, safe_operation)

    def run(self, policy: RetryPolicy, safe_operation: SafeOperation) -> RunResult:
        """Run safe_operation until success, exhaustion or deadline.

        Args:
            policy: Validated retry policy
            safe_operation: Wrapped operation (see wrap_operation)

        Returns:
            RunResult with outcome SUCCESS, EXHAUSTED or TIMED_OUT
        """
        if policy.has_deadline:
            return self._run_with_deadline(policy, safe_operation)
        return self._run_sequential(policy, safe_operation)

    def _retrying(
        self,
        policy: RetryPolicy,
        *,
        stop: stop_base,
        sleep: Callable[[float], None],
    ) -> Retrying:
        return Retrying(
            stop=stop,
            wait=backoff_strategy(policy),
            retry=retry_if_result(_is_failure),
            sleep=sleep,
            before_sleep=_log_retry_scheduled,
            retry_error_callback=_last_failure,
        )

    def _clamped_sleep(self, seconds: float) -> None:
        self._sleep(min(seconds, _MAX_WAIT))

    def _run_sequential(self, policy: RetryPolicy, safe_operation: SafeOperation) -> RunResult:
        started = self._clock.monotonic()
        failures: list[BaseException] = []

        def attempt() -> BaseException | None:
            failure = safe_operation()
            if failure is not None:
                failures.append(failure)
                logger.debug("attempt_failed", attempt=len(failures), error=_describe(failure))
            return failure

        retrying = self._retrying(policy, stop=stop_after_attempt(policy.max_attempts), sleep=self._clamped_sleep)
        last = retrying(attempt)
        elapsed = self._clock.monotonic() - started

        if last is None:
            return RunResult.success(attempts=len(failures) + 1, elapsed=elapsed)

        logger.warning("retries_exhausted", attempts=len(failures), last_error=_describe(last))
        return RunResult.exhausted(failures, elapsed=elapsed)

    def _run_with_deadline(self, policy: RetryPolicy, safe_operation: SafeOperation) -> RunResult:
        max_delay = policy.max_delay
        assert max_delay is not None, "deadline mode requires max_delay"

        results: queue.Queue[BaseException | None] = queue.Queue()
        cancelled = threading.Event()
        started = self._clock.monotonic()
        deadline = started + max_delay

        producer = threading.Thread(
            target=self._produce,
            args=(policy, safe_operation, results, cancelled),
            name=PRODUCER_THREAD_NAME,
            daemon=True,
        )
        producer.start()

        failures: list[BaseException] = []
        try:
            while True:
                remaining = deadline - self._clock.monotonic()
                if remaining <= 0:
                    break
                try:
                    failure = results.get(timeout=min(remaining, _MAX_WAIT))
                except queue.Empty:
                    break

                if failure is None:
                    return RunResult.success(
                        attempts=len(failures) + 1,
                        elapsed=self._clock.monotonic() - started,
                    )

                failures.append(failure)
                logger.debug("attempt_failed", attempt=len(failures), error=_describe(failure))
                if len(failures) >= policy.max_attempts:
                    logger.warning("retries_exhausted", attempts=len(failures), last_error=_describe(failure))
                    return RunResult.exhausted(failures, elapsed=self._clock.monotonic() - started)

            # Partial failure history is discarded on timeout
            logger.warning("retry_timed_out", max_delay=max_delay, attempts=len(failures))
            return RunResult.timed_out(max_delay, attempts=len(failures), elapsed=self._clock.monotonic() - started)
        finally:
            cancelled.set()

    def _produce(
        self,
        policy: RetryPolicy,
        safe_operation: SafeOperation,
        results: "queue.Queue[BaseException | None]",
        cancelled: threading.Event,
    ) -> None:
        """Producer thread: run the attempt loop, emitting one result per attempt."""

        def attempt() -> BaseException | None:
            failure = safe_operation()
            results.put(failure)
            return failure

        def interruptible_sleep(seconds: float) -> None:
            if cancelled.wait(min(seconds, _MAX_WAIT)):
                raise _ProducerCancelled

        retrying = self._retrying(
            policy,
            stop=stop_after_attempt(policy.max_attempts) | stop_when_event_set(cancelled),
            sleep=interruptible_sleep,
        )
        try:
            retrying(attempt)
        except _ProducerCancelled:
            logger.debug("producer_cancelled")
