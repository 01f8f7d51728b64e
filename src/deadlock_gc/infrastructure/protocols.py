"""Protocols for the external collaborators of the session client.

The transport adapter, the authentication service and the challenge
presenter live outside this package. These protocols define what the
session layer needs from them.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from deadlock_gc.domain.models import Credential, Envelope, TransportEvent

EventSink = Callable[[TransportEvent], None]


@runtime_checkable
class TransportAdapter(Protocol):
    """Owns the raw connection and moves envelopes in both directions.

    Lifecycle changes and inbound messages are reported by calling the sink
    given to bind(): Connected, Disconnected, LoggedOn, MessageReceived.
    """

    @property
    def is_connected(self) -> bool:
        """Whether the underlying connection is currently up."""
        ...

    def bind(self, sink: EventSink) -> None:
        """Register the callback that receives transport events."""
        ...

    async def connect(self) -> None:
        """Begin connecting; completion is reported with Connected."""
        ...

    async def disconnect(self) -> None:
        """Close the connection; completion is reported with Disconnected."""
        ...

    async def send(self, envelope: Envelope) -> None:
        """Send one envelope."""
        ...

    async def log_on(self, credential: Credential) -> None:
        """Send a logon request; the result is reported with LoggedOn."""
        ...


@runtime_checkable
class QrAuthSession(Protocol):
    """An interactive authentication in progress."""

    @property
    def challenge_url(self) -> str:
        ...

    async def wait_for_result(self) -> Credential:
        """Poll until the challenge is approved."""
        ...


@runtime_checkable
class Authenticator(Protocol):
    """Starts interactive (QR) authentication sessions."""

    async def begin_qr_session(
        self, on_challenge_changed: Callable[[str], None]
    ) -> QrAuthSession:
        """Start a session; on_challenge_changed fires on every refresh."""
        ...


@runtime_checkable
class ChallengePresenter(Protocol):
    """Renders a challenge for out-of-band approval."""

    def __call__(self, challenge_url: str) -> None:
        ...


@runtime_checkable
class CredentialStore(Protocol):
    """Durable home of the cached credential."""

    def load(self) -> Credential | None:
        """Return the stored credential, or None if there is none."""
        ...

    def save(self, credential: Credential) -> None:
        """Overwrite the stored credential."""
        ...
