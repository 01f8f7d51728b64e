"""Client event domain models

Typed notifications raised to subscribers of the client's event bus.
"""

from dataclasses import dataclass, field
from datetime import datetime

from .messages import ClientWelcome, DevPlaytestStatus
from .session import SessionState


@dataclass
class Event:
    """Base class for client events

    Attributes:
        timestamp: When the event was created
    """

    timestamp: datetime = field(default_factory=datetime.now, kw_only=True)


@dataclass
class SessionStateChanged(Event):
    """Session moved between lifecycle states

    Attributes:
        previous: State before the transition
        current: State after the transition
        error: Failure that caused the transition, if any
    """

    previous: SessionState
    current: SessionState
    error: Exception | None = None

    def __repr__(self) -> str:
        return (
            f"SessionStateChanged({self.previous.value} -> {self.current.value}"
            f"{', error=' + repr(self.error) if self.error else ''})"
        )


@dataclass
class ChallengeUpdated(Event):
    """Interactive authentication issued or refreshed its challenge"""

    challenge_url: str


@dataclass
class ClientWelcomeEvent(Event):
    """Coordinator welcomed the client"""

    data: ClientWelcome


@dataclass
class DevPlaytestStatusEvent(Event):
    """Coordinator pushed a playtest status update"""

    data: DevPlaytestStatus
