"""
Custom exceptions for hide-sync.

This module defines a hierarchy of exceptions for the sync engine,
providing structured error handling with context preservation.

Exception Hierarchy:
    HideSyncError (base)
    ├── ConnectionValidationError (validate-connection failures)
    ├── RemoteError (gist API failures)
    │   ├── RemoteStatusError (non-2xx responses)
    │   └── RemoteNetworkError (transport failures)
    ├── DocumentParseError (malformed remote content)
    └── StorageError (local persistence failures)

Only ConnectionValidationError is meant to reach callers of the command
surface. Remote and parse errors are caught at the pull/push boundary and
recorded into the sync status instead.

Example:
    >>> from hidesync.core.exceptions import RemoteStatusError
    >>> try:
    ...     raise RemoteStatusError("Failed to load gist", status_code=404)
    ... except RemoteStatusError as e:
    ...     print(e.status_code, e.context)
    404 {'status_code': 404}
"""


class HideSyncError(Exception):
    """
    Base exception for all hide-sync errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        """
        Initialize an error with message and context.

        Args:
            message: Human-readable error message
            **context: Additional context as keyword arguments
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message


class ConnectionValidationError(HideSyncError):
    """
    Raised when validating a connection to the remote fails.

    Covers a missing token, a token rejected by the identity check, and a
    failure to provision the remote gist during validation.
    """


class RemoteError(HideSyncError):
    """Base exception for failures talking to the remote gist API."""


class RemoteStatusError(RemoteError):
    """
    The remote API answered with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code returned by the API
    """

    def __init__(self, message: str, status_code: int, **context: object) -> None:
        super().__init__(message, status_code=status_code, **context)
        self.status_code = status_code


class RemoteNetworkError(RemoteError):
    """
    The request never produced a response (DNS, connect, timeout, ...).

    The underlying httpx exception is preserved via ``__cause__``.
    """


class DocumentParseError(HideSyncError):
    """Remote content could not be parsed into a Document."""


class StorageError(HideSyncError):
    """
    Local persistence failed.

    Raised when the state file cannot be read, written, or decoded.
    """


__all__ = [
    "HideSyncError",
    "ConnectionValidationError",
    "RemoteError",
    "RemoteStatusError",
    "RemoteNetworkError",
    "DocumentParseError",
    "StorageError",
]
