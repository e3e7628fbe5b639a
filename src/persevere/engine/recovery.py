# src/persevere/engine/recovery.py
"""Operation wrapper: turns raised exceptions into ordinary failure values.

The engine has one failure channel - a SafeOperation returns either None
(success) or an exception instance (failure). wrap_operation() is the only
place where a raised exception becomes a failure value:

- Normal return of None or any non-exception value -> None (success)
- Normal return of an exception instance -> that instance (returned failure)
- Raised Exception -> AbnormalTermination carrying payload and bounded trace

KeyboardInterrupt, SystemExit and GeneratorExit are process control, not
operation failures. They are not Exception subclasses and pass through.
"""

import sys
import threading
import traceback
from collections.abc import Callable

from persevere.contracts.errors import AbnormalTermination
from persevere.core.logging import get_logger

logger = get_logger(__name__)

Operation = Callable[[], object]
SafeOperation = Callable[[], BaseException | None]


def _truncate(text: str, buffer_size: int) -> str:
    """Keep at most buffer_size UTF-8 bytes, never splitting a character."""
    encoded = text.encode("utf-8")
    if len(encoded) <= buffer_size:
        return text
    return encoded[:buffer_size].decode("utf-8", errors="ignore")


def capture_trace(exc: BaseException, buffer_size: int, all_threads: bool) -> str:
    """Render a diagnostic trace for an intercepted exception.

    Args:
        exc: The exception raised by the operation
        buffer_size: Maximum size of the returned text in UTF-8 bytes
        all_threads: Also dump the current stack of every other live thread

    Returns:
        Trace text, truncated to buffer_size bytes
    """
    sections = ["".join(traceback.format_exception(exc))]

    if all_threads:
        current = threading.get_ident()
        names = {thread.ident: thread.name for thread in threading.enumerate()}
        for ident, frame in sys._current_frames().items():
            if ident == current:
                continue
            header = f"Thread {names.get(ident, '<unknown>')} ({ident}):\n"
            sections.append(header + "".join(traceback.format_stack(frame)))

    return _truncate("\n".join(sections), buffer_size)


def wrap_operation(
    operation: Operation,
    diagnostic_buffer_size: int,
    capture_all_threads: bool,
) -> SafeOperation:
    """Adapt an operation into a SafeOperation that never raises Exception.

    Args:
        operation: Zero-argument callable
        diagnostic_buffer_size: Bytes of trace kept on abnormal termination
        capture_all_threads: Trace every live thread instead of just the failing one

    Returns:
        Callable returning None on success or the failure value
    """

    def safe_operation() -> BaseException | None:
        try:
            result = operation()
        except Exception as exc:
            trace = capture_trace(exc, diagnostic_buffer_size, capture_all_threads)
            logger.debug("operation_raised", error_type=type(exc).__name__, error=str(exc))
            return AbnormalTermination(exc, trace)

        if isinstance(result, BaseException):
            return result
        return None

    return safe_operation
