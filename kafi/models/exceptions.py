"""
Custom exceptions for the key-value store.
"""


class KafiError(Exception):
    """Base class for all store errors."""


class StoreIOError(KafiError):
    """
    Raised when the backing file cannot be read or written.

    Wraps the underlying OSError so callers can inspect the OS-level cause.
    """

    def __init__(self, path: str, operation: str, cause: OSError):
        """
        Initialize I/O error.

        Args:
            path: Backing file path.
            operation: The failed operation ("read" or "write").
            cause: The OSError raised by the filesystem.
        """
        self.path = path
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} store file {path}: {cause}")


class DecodeError(KafiError):
    """
    Raised when bytes do not parse as a valid encoded snapshot or value.

    Only raised while opening a store; there is no partial recovery.
    """

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        if path is not None:
            message = f"Corrupt store file {path}: {message}"
        super().__init__(message)


class EncodeError(KafiError):
    """Raised when an in-memory key or value cannot be serialized by its codec."""
