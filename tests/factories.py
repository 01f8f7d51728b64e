"""Test doubles for the external collaborators of the session client"""

import asyncio

from pydantic import BaseModel

from deadlock_gc.domain.models import (
    Connected,
    Credential,
    Disconnected,
    Envelope,
    EResult,
    LoggedOn,
    MessageReceived,
)

ACCOUNT_ID = 1234


class FakeTransport:
    """In-memory transport adapter

    Reports lifecycle events synchronously through the bound sink and
    records everything sent.
    """

    def __init__(
        self,
        *,
        auto_connect: bool = True,
        logon_result: int | None = EResult.OK,
        account_id: int | None = ACCOUNT_ID,
    ) -> None:
        self.auto_connect = auto_connect
        self.logon_result = logon_result
        self.account_id = account_id
        self.connected = False
        self.sink = None
        self.sent: list[Envelope] = []
        self.logons: list[Credential] = []
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.send_error: Exception | None = None
        self.connect_error: Exception | None = None

    @property
    def is_connected(self) -> bool:
        return self.connected

    def bind(self, sink) -> None:
        self.sink = sink

    async def connect(self) -> None:
        self.connect_calls += 1
        if self.connect_error is not None:
            raise self.connect_error
        if self.auto_connect:
            self.connected = True
            self.sink(Connected())

    async def disconnect(self) -> None:
        self.disconnect_calls += 1
        self.connected = False
        self.sink(Disconnected(reason="closed by client"))

    async def send(self, envelope: Envelope) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(envelope)

    async def log_on(self, credential: Credential) -> None:
        self.logons.append(credential)
        if self.logon_result is not None:
            self.sink(LoggedOn(result=self.logon_result, account_id=self.account_id))

    # ---- test helpers ----

    def drop(self) -> None:
        self.connected = False
        self.sink(Disconnected(reason="network lost"))

    def deliver(self, envelope: Envelope) -> None:
        self.sink(MessageReceived(envelope))

    def push(self, msg_type: int, body: BaseModel | bytes, target_job_id: int = 0) -> None:
        payload = body if isinstance(body, bytes) else body.model_dump_json().encode()
        self.deliver(
            Envelope(msg_type=msg_type, payload=payload, target_job_id=target_job_id)
        )

    def reply_to(
        self, request: Envelope, msg_type: int, body: BaseModel | bytes
    ) -> None:
        self.push(msg_type, body, target_job_id=request.source_job_id)

    def sent_of_type(self, msg_type: int) -> list[Envelope]:
        return [e for e in self.sent if e.msg_type == msg_type]


class FakeQrSession:
    def __init__(self, authenticator: "FakeAuthenticator", on_changed) -> None:
        self._authenticator = authenticator
        self._on_changed = on_changed
        self.challenge_url = authenticator.challenge_url

    async def wait_for_result(self) -> Credential:
        for url in self._authenticator.refreshed_urls:
            await asyncio.sleep(0)
            self.challenge_url = url
            self._on_changed(url)
        await asyncio.sleep(0)
        if self._authenticator.error is not None:
            raise self._authenticator.error
        return self._authenticator.credential


class FakeAuthenticator:
    """Approves (or rejects) every QR session after optional refreshes"""

    def __init__(
        self,
        credential: Credential | None = None,
        *,
        error: Exception | None = None,
        challenge_url: str = "https://s.team/q/1/first",
        refreshed_urls: tuple[str, ...] = (),
    ) -> None:
        self.credential = credential
        self.error = error
        self.challenge_url = challenge_url
        self.refreshed_urls = refreshed_urls
        self.begin_calls = 0

    async def begin_qr_session(self, on_challenge_changed) -> FakeQrSession:
        self.begin_calls += 1
        return FakeQrSession(self, on_challenge_changed)


class RecordingPresenter:
    def __init__(self) -> None:
        self.challenges: list[str] = []

    def __call__(self, challenge_url: str) -> None:
        self.challenges.append(challenge_url)
