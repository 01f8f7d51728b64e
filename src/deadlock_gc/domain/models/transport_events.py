"""Events delivered by the transport adapter to the session loop"""

from dataclasses import dataclass

from .credential import Credential
from .envelope import Envelope


@dataclass(frozen=True)
class Connected:
    """Transport finished its handshake"""


@dataclass(frozen=True)
class Disconnected:
    """Transport connection closed, deliberately or not"""

    reason: str | None = None


@dataclass(frozen=True)
class LoggedOn:
    """Result of a logon attempt

    Attributes:
        result: EResult code reported by the remote service
        account_id: Numeric account id of the logged-on identity
    """

    result: int
    account_id: int | None = None


@dataclass(frozen=True)
class MessageReceived:
    """Inbound application message"""

    envelope: Envelope


@dataclass(frozen=True)
class InteractiveAuthCompleted:
    """Outcome of the interactive authentication task

    Exactly one of credential or error is set.
    """

    credential: Credential | None = None
    error: Exception | None = None


TransportEvent = (
    Connected | Disconnected | LoggedOn | MessageReceived | InteractiveAuthCompleted
)
