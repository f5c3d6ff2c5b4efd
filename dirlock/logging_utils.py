"""stderr logger helpers for dirlock."""

from __future__ import annotations

import sys
from datetime import datetime, timezone


def utc_timestamp() -> str:
    """Return an RFC3339 UTC timestamp with second precision."""
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


class DirLockLogger:
    """Simple structured logger writing to stderr only.

    Silent until enabled; a lock primitive should not write to the host
    program's stderr unless asked to.
    """

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled

    def _emit(self, level: str, message: str) -> None:
        if not self.enabled:
            return
        print(f"[DIRLOCK {utc_timestamp()}] {level}: {message}", file=sys.stderr, flush=True)

    def debug(self, message: str) -> None:
        self._emit("DEBUG", message)

    def warn(self, message: str) -> None:
        self._emit("WARN", message)


LOGGER = DirLockLogger()


def enable_stderr_logging(enabled: bool = True) -> None:
    """Turn dirlock's stderr output on or off."""
    LOGGER.enabled = enabled
