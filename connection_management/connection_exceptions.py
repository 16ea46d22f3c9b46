"""
Connection Management Exceptions

Specialized exceptions for the HTTP transport. All of them derive from the
root ConnectionError so callers can catch transport failures uniformly.
"""

from arango_ops_exceptions import ConnectionError as BaseConnectionError


class ConnectionError(BaseConnectionError):
    """
    Base exception for all transport-related errors.

    Raised when a request could not be delivered or no response was received.
    """
    pass


class ConnectionClosedError(ConnectionError):
    """
    Raised when attempting to use a closed connection.

    The underlying HTTP client is released by aclose(); any request issued
    afterwards fails with this error instead of reopening sockets silently.
    """
    pass


class MaxRetriesExceededError(ConnectionError):
    """
    Raised when a transport failure persisted through every retry attempt.

    Attributes:
        attempts: Number of attempts made before giving up
    """

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts
