"""Game-coordinator session module

AuthManager - Cached credential and interactive QR authentication
SessionManager - Connection lifecycle, logon and reconnect policy
JobCorrelator - Request/reply correlation by job id
MessageDispatcher - Routing of unsolicited messages by type tag
DeadlockClient - Facade with the typed request calls
"""

from .auth import AuthManager
from .connection import SessionManager
from .dispatcher import MessageDispatcher
from .facade import DeadlockClient, MatchMetaData, build_replay_urls
from .jobs import JobCorrelator, PendingJob

__all__ = [
    "AuthManager",
    "DeadlockClient",
    "JobCorrelator",
    "MatchMetaData",
    "MessageDispatcher",
    "PendingJob",
    "SessionManager",
    "build_replay_urls",
]
