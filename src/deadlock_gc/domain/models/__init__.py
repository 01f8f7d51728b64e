"""Domain models for the coordinator session client"""

from .credential import Credential
from .envelope import JOB_ID_NONE, Envelope
from .event import (
    ChallengeUpdated,
    ClientWelcomeEvent,
    DevPlaytestStatusEvent,
    Event,
    SessionStateChanged,
)
from .messages import EMsg, EResult, GCMsg
from .session import SessionState
from .transport_events import (
    Connected,
    Disconnected,
    InteractiveAuthCompleted,
    LoggedOn,
    MessageReceived,
    TransportEvent,
)

__all__ = [
    "ChallengeUpdated",
    "ClientWelcomeEvent",
    "Connected",
    "Credential",
    "DevPlaytestStatusEvent",
    "Disconnected",
    "EMsg",
    "EResult",
    "Envelope",
    "Event",
    "GCMsg",
    "InteractiveAuthCompleted",
    "JOB_ID_NONE",
    "LoggedOn",
    "MessageReceived",
    "SessionState",
    "SessionStateChanged",
    "TransportEvent",
]
