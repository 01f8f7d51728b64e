"""Consolidated exceptions for the deadlock-gc client.

All custom exceptions are defined here to provide a single source of truth
for error handling across the session, correlation and dispatch layers.
"""


class DeadlockGCError(Exception):
    """Base exception for deadlock-gc errors"""

    pass


class AuthenticationError(DeadlockGCError):
    """Raised when logon or interactive authentication fails

    Fatal for the current attempt. The session does not retry on its own.
    """

    def __init__(self, message: str, result: int | None = None) -> None:
        super().__init__(message)
        self.result = result


class TransportError(DeadlockGCError):
    """Raised when the transport adapter fails to send or connect"""

    pass


class TransportDroppedError(TransportError):
    """Raised when the transport connection drops unexpectedly"""

    pass


class ReplyTimeoutError(DeadlockGCError):
    """Raised when a correlated reply does not arrive in time"""

    def __init__(self, job_id: int, timeout: float) -> None:
        super().__init__(f"No reply for job {job_id} within {timeout}s")
        self.job_id = job_id
        self.timeout = timeout


class ReplyDecodeError(DeadlockGCError):
    """Raised when a correlated reply payload cannot be decoded"""

    pass


class SessionClosedError(DeadlockGCError):
    """Raised for requests outstanding when the session tears down"""

    pass
