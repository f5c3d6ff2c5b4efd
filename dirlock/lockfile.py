"""Exclusive-create lock files for cross-process coordination.

A lock is the existence of a file. ``lock()`` creates it with
``O_CREAT | O_EXCL`` so exactly one caller can win, ``unlock()`` removes it.
Nothing is kept in memory: the token outlives the process that created it,
and a crashed holder leaves a stale file that has to be removed by hand.
"""

from __future__ import annotations

import asyncio
import math
import os
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from pathlib import Path
from typing import Iterator, Union

from .config import DEFAULT_TIMING, LockTiming
from .errors import (
    InvalidPathError,
    InvalidTimeoutError,
    LockAcquireError,
    LockHeldError,
    LockReleaseError,
)
from .logging_utils import LOGGER

DEFAULT_LOCK_NAME = ".lockfile-gthsf4563"
LOCK_FILE_MODE = 0o666

Timeout = Union[int, float, timedelta]


def _timeout_seconds(timeout: Timeout) -> float:
    if isinstance(timeout, timedelta):
        return timeout.total_seconds()
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise InvalidTimeoutError(f"Invalid timeout({timeout!r})")
    return float(timeout)


@dataclass(frozen=True)
class Lockfile:
    """Handle for a lock token at ``directory / name``."""

    directory: Path
    name: str
    timing: LockTiming = field(default=DEFAULT_TIMING, compare=False)

    @classmethod
    def from_path(cls, path: str | os.PathLike[str], *, timing: LockTiming | None = None) -> Lockfile:
        return new_lockfile(path, timing=timing)

    @property
    def path(self) -> Path:
        return self.directory / self.name

    def lock(self) -> None:
        """Create the lock token once, without waiting.

        Raises LockHeldError if the token already exists and LockAcquireError
        for any other OS failure.
        """
        try:
            fd = os.open(self.path, os.O_RDONLY | os.O_CREAT | os.O_EXCL, LOCK_FILE_MODE)
        except FileExistsError as exc:
            raise LockHeldError(f"Failed to acquire lock: {exc}") from exc
        except OSError as exc:
            raise LockAcquireError(f"Failed to acquire lock: {exc}") from exc
        os.close(fd)
        LOGGER.debug(f"Acquired lock {self.path}")

    def unlock(self) -> None:
        """Remove the lock token.

        Ownership is not checked: this removes the token whoever created it.
        """
        try:
            os.remove(self.path)
        except OSError as exc:
            raise LockReleaseError(exc.errno, exc.strerror, exc.filename) from exc
        LOGGER.debug(f"Released lock {self.path}")

    def is_locked(self) -> bool:
        """Return whether the token currently exists on disk."""
        return os.path.lexists(self.path)

    def _check_timeout(self, timeout: Timeout) -> float:
        seconds = _timeout_seconds(timeout)
        if not (math.isfinite(seconds) and seconds >= self.timing.min_timeout_seconds):
            raise InvalidTimeoutError(f"Invalid timeout({timeout})")
        return seconds

    def lock_wait(self, timeout: Timeout) -> None:
        """Poll ``lock()`` until it succeeds or ``timeout`` has elapsed.

        The call never gives up before ``timeout`` but can overrun it by one
        poll interval plus one attempt. On expiry the last acquisition error
        is raised. Waiters are not queued; whoever creates the file first wins.
        """
        seconds = self._check_timeout(timeout)
        deadline = time.monotonic() + seconds
        while True:
            try:
                self.lock()
                return
            except LockAcquireError as exc:
                LOGGER.debug(f"Lock attempt on {self.path} failed: {exc}")
                time.sleep(self.timing.poll_interval_seconds)
                if time.monotonic() >= deadline:
                    LOGGER.warn(f"Gave up waiting for {self.path} after {seconds:g}s")
                    raise

    async def lock_wait_async(self, timeout: Timeout) -> None:
        """Like ``lock_wait`` but sleeps with ``asyncio.sleep`` between attempts."""
        seconds = self._check_timeout(timeout)
        deadline = time.monotonic() + seconds
        while True:
            try:
                self.lock()
                return
            except LockAcquireError as exc:
                LOGGER.debug(f"Lock attempt on {self.path} failed: {exc}")
                await asyncio.sleep(self.timing.poll_interval_seconds)
                if time.monotonic() >= deadline:
                    LOGGER.warn(f"Gave up waiting for {self.path} after {seconds:g}s")
                    raise

    @contextmanager
    def held(self, timeout: Timeout | None = None) -> Iterator[Lockfile]:
        """Hold the lock for the duration of a ``with`` block."""
        if timeout is None:
            self.lock()
        else:
            self.lock_wait(timeout)
        try:
            yield self
        finally:
            self.unlock()


def new_lockfile(path: str | os.PathLike[str], *, timing: LockTiming | None = None) -> Lockfile:
    """Resolve ``path`` into a lock handle. Nothing on disk is created or changed.

    An existing directory gets the default lock name. Anything else is split
    into parent directory and file name; the parent must exist.
    """
    raw = os.fspath(path)
    resolved_timing = timing or DEFAULT_TIMING
    if os.path.isdir(raw):
        return Lockfile(directory=Path(raw), name=DEFAULT_LOCK_NAME, timing=resolved_timing)

    directory, name = os.path.split(raw)
    try:
        os.stat(directory)
    except OSError as exc:
        raise InvalidPathError(f"Invalid path/filename given({raw})") from exc
    return Lockfile(directory=Path(directory), name=name, timing=resolved_timing)


@contextmanager
def exclusive_lock(lock_path: str | os.PathLike[str], *, timeout: Timeout | None = None) -> Iterator[Lockfile]:
    """Acquire an exclusive lock file for the duration of a ``with`` block."""
    with new_lockfile(lock_path).held(timeout) as lockfile:
        yield lockfile
