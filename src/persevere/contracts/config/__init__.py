"""Runtime retry configuration.

Import patterns:
    from persevere.contracts.config import RetryPolicy, POLICY_DEFAULTS

Settings models (pydantic) live in persevere.core.config and are converted
with RetryPolicy.from_settings().
"""

from persevere.contracts.config.defaults import POLICY_DEFAULTS
from persevere.contracts.config.runtime import (
    RetryPolicy,
    check_buffer_size,
    check_max_attempts,
    check_positive_duration,
    check_random_bounds,
)

__all__ = [
    "POLICY_DEFAULTS",
    "RetryPolicy",
    "check_buffer_size",
    "check_max_attempts",
    "check_positive_duration",
    "check_random_bounds",
]
