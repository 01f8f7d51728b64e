"""DeadlockClient - Facade over the session, correlation and dispatch layers"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel

from deadlock_gc.application.events import EventBus
from deadlock_gc.core.config import ClientConfig
from deadlock_gc.domain.models import (
    ChallengeUpdated,
    DevPlaytestStatusEvent,
    Envelope,
    Event,
    GCMsg,
    SessionState,
)
from deadlock_gc.domain.models.messages import (
    ClientWelcome,
    DevPlaytestStatus,
    GetActiveMatches,
    GetActiveMatchesResponse,
    GetMatchHistory,
    GetMatchHistoryResponse,
    GetMatchMetaData,
    GetMatchMetaDataResponse,
    SpectateLobby,
    SpectateLobbyResponse,
)
from deadlock_gc.shared.exceptions import (
    ReplyDecodeError,
    SessionClosedError,
    TransportError,
)
from deadlock_gc.shared.logging import install_logging_bridge

from ..codec import PayloadCodec
from ..credentials import FileCredentialStore
from ..presenter import ConsoleChallengePresenter
from ..protocols import (
    Authenticator,
    ChallengePresenter,
    CredentialStore,
    TransportAdapter,
)
from .auth import AuthManager
from .connection import SessionManager
from .dispatcher import MessageDispatcher
from .jobs import Decoder, JobCorrelator

R = TypeVar("R", bound=BaseModel)

REPLAY_HOST = "http://replay{cluster_id}.valve.net"

# Active-match replies carry a fixed-size header ahead of the compressed body
ACTIVE_MATCHES_HEADER_SIZE = 24


@dataclass
class MatchMetaData:
    """Match metadata reply plus the download URLs derived from it"""

    data: GetMatchMetaDataResponse
    replay_url: str
    metadata_url: str


def build_replay_urls(
    app_id: int, match_id: int, reply: GetMatchMetaDataResponse
) -> tuple[str, str]:
    """Build the replay and metadata download URLs for a match

    Returns:
        (replay_url, metadata_url)
    """
    host = REPLAY_HOST.format(cluster_id=reply.cluster_id)
    replay_url = f"{host}/{app_id}/{match_id}_{reply.replay_salt}.dem.bz2"
    metadata_url = f"{host}/{app_id}/{match_id}_{reply.metadata_salt}.meta.bz2"
    return replay_url, metadata_url


class DeadlockClient:
    """Game-coordinator session client (facade pattern)

    Wires SessionManager, JobCorrelator, MessageDispatcher and EventBus
    together and exposes the typed request calls built on send_correlated().

    Usage:
        client = DeadlockClient(transport, authenticator=qr_auth)
        runner = asyncio.create_task(client.run())
        await client.connect()
        await client.wait_for_state(SessionState.ACTIVE)
        meta = await client.get_match_metadata(42)
    """

    def __init__(
        self,
        transport: TransportAdapter,
        *,
        authenticator: Authenticator | None = None,
        credential_store: CredentialStore | None = None,
        presenter: ChallengePresenter | None = None,
        config: ClientConfig | None = None,
        decompressor: Callable[[bytes], bytes] | None = None,
    ) -> None:
        """Initialize the client

        Args:
            transport: Adapter owning the raw connection
            authenticator: Interactive QR authentication service
            credential_store: Cached credential; defaults to files in
                config.credential_dir
            presenter: Renders challenge URLs; defaults to the console
            config: Client configuration
            decompressor: Decompresses the active-matches body
        """
        self._config = config or ClientConfig()
        self._transport = transport
        self._codec = PayloadCodec()
        self._decompressor = decompressor or (lambda body: body)

        self._events = EventBus()
        self._correlator = JobCorrelator(
            self._codec, default_timeout=self._config.reply_timeout_seconds
        )
        self._dispatcher = MessageDispatcher(codec=self._codec)
        self._auth_manager = AuthManager(
            credential_store or FileCredentialStore(self._config.credential_dir),
            authenticator,
            presenter or ConsoleChallengePresenter(),
            on_challenge=self._on_challenge,
        )
        self._session = SessionManager(
            transport,
            self._auth_manager,
            self._correlator,
            self._dispatcher,
            self._events,
            self._config,
            self._codec,
        )

        self._dispatcher.register(
            GCMsg.CLIENT_WELCOME, ClientWelcome, self._session.on_client_welcome
        )
        self._dispatcher.register(
            GCMsg.DEV_PLAYTEST_STATUS, DevPlaytestStatus, self._on_dev_playtest_status
        )

        install_logging_bridge()

    # ---- components ----

    @property
    def session(self) -> SessionManager:
        return self._session

    @property
    def correlator(self) -> JobCorrelator:
        return self._correlator

    @property
    def dispatcher(self) -> MessageDispatcher:
        return self._dispatcher

    @property
    def events(self) -> EventBus:
        return self._events

    # ---- lifecycle ----

    @property
    def is_connected(self) -> bool:
        """Transport connectivity"""
        return self._session.is_connected

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def last_error(self) -> Exception | None:
        return self._session.last_error

    async def connect(self) -> None:
        await self._session.connect()

    async def disconnect(self) -> None:
        await self._session.disconnect()

    async def run(self) -> None:
        """Run the dispatch loop until cancelled"""
        await self._session.run()

    async def run_once(self, timeout: float | None = 1.0) -> int:
        return await self._session.run_once(timeout)

    async def wait_for_state(
        self, state: SessionState, timeout: float | None = None
    ) -> None:
        await self._session.wait_for_state(state, timeout)

    # ---- events ----

    def subscribe(self, event_type: type[Event], handler: Callable) -> None:
        self._events.subscribe(event_type, handler)

    def unsubscribe(self, event_type: type[Event], handler: Callable) -> None:
        self._events.unsubscribe(event_type, handler)

    def register_handler(
        self, msg_type: int, model: type[BaseModel], handler: Callable[[Any], None]
    ) -> None:
        """Handle another unsolicited message type"""
        self._dispatcher.register(msg_type, model, handler)

    def _on_challenge(self, challenge_url: str) -> None:
        self._events.publish(ChallengeUpdated(challenge_url=challenge_url))

    def _on_dev_playtest_status(self, status: DevPlaytestStatus) -> None:
        self._events.publish(DevPlaytestStatusEvent(data=status))

    # ---- correlated requests ----

    async def send_correlated(
        self,
        msg_type: int,
        request: BaseModel,
        reply_model: type[R] | None = None,
        *,
        expected_type: int | None = None,
        decode: Decoder | None = None,
        timeout: float | None = ...,  # type: ignore[assignment]
    ) -> Any:
        """Send a request and wait for its correlated reply

        Args:
            msg_type: Request type tag
            request: Request body
            reply_model: Model the reply decodes to
            expected_type: Reply type tag to insist on
            decode: Custom reply decoder, overrides reply_model
            timeout: Seconds to wait, None for no timeout, omitted for default

        Returns:
            Decoded reply

        Raises:
            SessionClosedError: If not connected, or the session tears down
            TransportError: If the request could not be sent
            ReplyTimeoutError: If no reply arrives in time
            ReplyDecodeError: If the reply cannot be decoded
        """
        if not self._transport.is_connected:
            raise SessionClosedError("Not connected")

        job = self._correlator.register(
            reply_model, expected_type=expected_type, decode=decode, timeout=timeout
        )
        envelope = Envelope(
            msg_type=msg_type,
            payload=self._codec.encode(request),
            source_job_id=job.job_id,
            app_id=self._config.app_id,
        )
        logger.debug(f"Sending job {job.job_id}: {envelope!r}")

        try:
            await self._transport.send(envelope)
        except Exception as e:
            self._correlator.fail(job.job_id, TransportError(f"Send failed: {e}"))

        return await job.future

    async def get_match_metadata(self, match_id: int) -> MatchMetaData:
        """Look up a match's metadata and derive its download URLs"""
        reply = await self.send_correlated(
            GCMsg.GET_MATCH_META_DATA,
            GetMatchMetaData(match_id=match_id),
            GetMatchMetaDataResponse,
            expected_type=GCMsg.GET_MATCH_META_DATA_RESPONSE,
        )
        logger.info(
            f"Match {match_id} metadata: result={reply.result} "
            f"cluster={reply.cluster_id} replay_salt={reply.replay_salt}"
        )
        replay_url, metadata_url = build_replay_urls(
            self._config.app_id, match_id, reply
        )
        return MatchMetaData(
            data=reply, replay_url=replay_url, metadata_url=metadata_url
        )

    async def spectate_lobby(self, lobby_id: int) -> SpectateLobbyResponse:
        return await self.send_correlated(
            GCMsg.SPECTATE_LOBBY,
            SpectateLobby(
                lobby_id=lobby_id, client_version=self._session.client_version
            ),
            SpectateLobbyResponse,
            expected_type=GCMsg.SPECTATE_LOBBY_RESPONSE,
        )

    async def get_match_history(self) -> GetMatchHistoryResponse:
        """Fetch the match history of the logged-on account"""
        account_id = self._session.account_id
        if account_id is None:
            raise SessionClosedError("Not logged on")
        return await self.send_correlated(
            GCMsg.GET_MATCH_HISTORY,
            GetMatchHistory(account_id=account_id),
            GetMatchHistoryResponse,
            expected_type=GCMsg.GET_MATCH_HISTORY_RESPONSE,
        )

    async def get_active_matches(self) -> GetActiveMatchesResponse:
        return await self.send_correlated(
            GCMsg.GET_ACTIVE_MATCHES,
            GetActiveMatches(),
            expected_type=GCMsg.GET_ACTIVE_MATCHES_RESPONSE,
            decode=self._decode_active_matches,
        )

    def _decode_active_matches(self, payload: bytes) -> GetActiveMatchesResponse:
        if len(payload) < ACTIVE_MATCHES_HEADER_SIZE:
            raise ReplyDecodeError(
                f"Active matches reply too short: {len(payload)} bytes"
            )
        body = self._decompressor(payload[ACTIVE_MATCHES_HEADER_SIZE:])
        return self._codec.decode(body, GetActiveMatchesResponse)
