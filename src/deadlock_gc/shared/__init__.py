"""Shared utilities and exceptions"""

from .exceptions import (
    AuthenticationError,
    DeadlockGCError,
    ReplyDecodeError,
    ReplyTimeoutError,
    SessionClosedError,
    TransportDroppedError,
    TransportError,
)

__all__ = [
    "AuthenticationError",
    "DeadlockGCError",
    "ReplyDecodeError",
    "ReplyTimeoutError",
    "SessionClosedError",
    "TransportDroppedError",
    "TransportError",
]
