"""Custom errors for dirlock."""


class DirLockError(Exception):
    """Base dirlock exception."""


class DirLockConfigError(DirLockError):
    """Raised when lock timing configuration is invalid."""


class InvalidPathError(DirLockError):
    """Raised when a lock path cannot be resolved to an existing directory."""


class InvalidTimeoutError(DirLockError):
    """Raised when a wait timeout is below the supported floor."""


class LockAcquireError(DirLockError):
    """Raised when the lock token cannot be created."""


class LockHeldError(LockAcquireError):
    """Raised when the lock token already exists."""


class LockReleaseError(DirLockError, OSError):
    """Raised when the lock token cannot be removed."""
