# src/persevere/contracts/config/defaults.py
"""Default values for RetryPolicy fields.

POLICY_DEFAULTS is the single source of truth shared by RetryPolicy, the
Retryable builder and the pydantic settings models. Change a default here
and every entry point picks it up.
"""

from typing import Final

POLICY_DEFAULTS: Final[dict[str, int | bool]] = {
    # One invocation, no retries, unless configured otherwise
    "max_attempts": 1,
    # Bytes of diagnostic trace kept when an operation raises
    "diagnostic_buffer_size": 4096,
    "capture_all_threads": False,
}
