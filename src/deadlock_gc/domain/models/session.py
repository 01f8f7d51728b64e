"""Session domain model"""

from enum import Enum


class SessionState(Enum):
    """Lifecycle states of a coordinator session

    The machine loops: there is no terminal state.
    """

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AUTHENTICATING_INTERACTIVE = "authenticating_interactive"
    AUTHENTICATING_CACHED = "authenticating_cached"
    LOGGED_ON = "logged_on"
    ACTIVE = "active"

    @property
    def is_authenticating(self) -> bool:
        return self in (
            SessionState.AUTHENTICATING_INTERACTIVE,
            SessionState.AUTHENTICATING_CACHED,
        )
