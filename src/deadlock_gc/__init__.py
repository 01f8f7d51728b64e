"""
Public API:
- DeadlockClient: session client with awaitable correlated requests
- SessionState, Credential, Envelope: core domain types
- ClientConfig: configuration loaded from DEADLOCK_GC_* environment variables
- configure_logging: loguru sinks from ClientConfig.log_level / log_dir
- Client events: SessionStateChanged, ClientWelcomeEvent, DevPlaytestStatusEvent
"""

from .core.config import ClientConfig
from .domain.models import (
    ChallengeUpdated,
    ClientWelcomeEvent,
    Credential,
    DevPlaytestStatusEvent,
    Envelope,
    SessionState,
    SessionStateChanged,
)
from .infrastructure.coordinator import DeadlockClient, MatchMetaData
from .infrastructure.credentials import FileCredentialStore, MemoryCredentialStore
from .shared.exceptions import (
    AuthenticationError,
    DeadlockGCError,
    ReplyDecodeError,
    ReplyTimeoutError,
    SessionClosedError,
    TransportDroppedError,
    TransportError,
)
from .shared.logging import configure_logging

__all__ = [
    "AuthenticationError",
    "ChallengeUpdated",
    "ClientConfig",
    "ClientWelcomeEvent",
    "Credential",
    "DeadlockClient",
    "DeadlockGCError",
    "DevPlaytestStatusEvent",
    "Envelope",
    "FileCredentialStore",
    "MatchMetaData",
    "MemoryCredentialStore",
    "ReplyDecodeError",
    "ReplyTimeoutError",
    "SessionClosedError",
    "SessionState",
    "SessionStateChanged",
    "TransportDroppedError",
    "TransportError",
    "configure_logging",
]

__version__ = "0.1.0"
