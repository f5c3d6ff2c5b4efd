"""Polling and timeout settings for dirlock."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .errors import DirLockConfigError

POLL_INTERVAL_SECONDS = 0.1
MIN_TIMEOUT_SECONDS = 0.1


def _positive_seconds(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DirLockConfigError(f"{key} must be a number of seconds, got {value!r}")
    if not (math.isfinite(value) and value > 0):
        raise DirLockConfigError(f"{key} must be a finite number > 0, got {value!r}")
    return float(value)


@dataclass(frozen=True)
class LockTiming:
    """Sleep between lock attempts and the smallest accepted wait timeout."""

    poll_interval_seconds: float = POLL_INTERVAL_SECONDS
    min_timeout_seconds: float = MIN_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        _positive_seconds(self.poll_interval_seconds, "poll_interval_seconds")
        _positive_seconds(self.min_timeout_seconds, "min_timeout_seconds")


DEFAULT_TIMING = LockTiming()


def resolve_timing(
    poll_interval_seconds: Any = None,
    min_timeout_seconds: Any = None,
) -> LockTiming:
    """Build a LockTiming, falling back to defaults for omitted values."""
    return LockTiming(
        poll_interval_seconds=POLL_INTERVAL_SECONDS if poll_interval_seconds is None else poll_interval_seconds,
        min_timeout_seconds=MIN_TIMEOUT_SECONDS if min_timeout_seconds is None else min_timeout_seconds,
    )
