"""SessionManager - Connection lifecycle, logon and reconnect policy"""

import asyncio

from loguru import logger

from deadlock_gc.application.events import EventBus
from deadlock_gc.core.config import ClientConfig
from deadlock_gc.domain.models import (
    ClientWelcomeEvent,
    Connected,
    Credential,
    Disconnected,
    EMsg,
    Envelope,
    EResult,
    GCMsg,
    InteractiveAuthCompleted,
    LoggedOn,
    MessageReceived,
    SessionState,
    SessionStateChanged,
    TransportEvent,
)
from deadlock_gc.domain.models.messages import (
    ClientHello,
    ClientWelcome,
    GamePlayed,
    GamesPlayed,
)
from deadlock_gc.shared.exceptions import (
    AuthenticationError,
    SessionClosedError,
    TransportDroppedError,
)

from ..codec import PayloadCodec
from ..protocols import TransportAdapter
from .auth import AuthManager
from .dispatcher import MessageDispatcher
from .jobs import JobCorrelator


class SessionManager:
    """Drives the connect -> authenticate -> logged on -> active lifecycle

    Responsibilities:
    - Serialized processing of transport events (one dispatch loop)
    - Cached or interactive logon
    - Post-logon handshake (declare app, hello)
    - Reconnect after unexpected drops, never after disconnect() or a
      failed logon
    - Routing inbound messages to exactly one of correlator or dispatcher
    """

    def __init__(
        self,
        transport: TransportAdapter,
        auth_manager: AuthManager,
        correlator: JobCorrelator,
        dispatcher: MessageDispatcher,
        events: EventBus,
        config: ClientConfig | None = None,
        codec: PayloadCodec | None = None,
    ) -> None:
        """Initialize session manager

        Args:
            transport: Adapter owning the raw connection; bound to post()
            auth_manager: Supplies the credential for each logon
            correlator: Receives replies to pending jobs
            dispatcher: Receives every other inbound message
            events: Bus for state changes and pushed messages
            config: Delays and app id
            codec: Encoder for lifecycle message bodies
        """
        self._transport = transport
        self._auth_manager = auth_manager
        self._correlator = correlator
        self._dispatcher = dispatcher
        self._events = events
        self._config = config or ClientConfig()
        self._codec = codec or PayloadCodec()

        self._state = SessionState.DISCONNECTED
        self._queue: asyncio.Queue[TransportEvent] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._user_initiated_disconnect = False
        self._auth_task: asyncio.Task | None = None
        self._state_waiters: list[tuple[SessionState, asyncio.Future]] = []

        self._account_id: int | None = None
        self._client_version = 0
        self._last_error: Exception | None = None

        self._transport.bind(self.post)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        """Transport connectivity, not full session activity"""
        return self._transport.is_connected

    @property
    def account_id(self) -> int | None:
        """Account id of the logged-on identity"""
        return self._account_id

    @property
    def client_version(self) -> int:
        """Client version advertised by the coordinator's welcome"""
        return self._client_version

    @property
    def last_error(self) -> Exception | None:
        return self._last_error

    @property
    def user_initiated_disconnect(self) -> bool:
        return self._user_initiated_disconnect

    # ---- public lifecycle ----

    async def connect(self) -> None:
        """Start moving toward ACTIVE

        Ignored unless the session is DISCONNECTED. A transport that fails
        to start connecting is handled like a dropped connection.
        """
        self._loop = asyncio.get_running_loop()
        if self._state is not SessionState.DISCONNECTED:
            logger.debug(f"connect() ignored in state {self._state.value}")
            return

        logger.info("Connecting to Steam...")
        self._user_initiated_disconnect = False
        self._set_state(SessionState.CONNECTING)

        try:
            await self._transport.connect()
        except Exception as e:
            logger.warning(f"Transport connect failed: {e}")
            self.post(Disconnected(reason=f"connect failed: {e}"))

    async def disconnect(self) -> None:
        """Tear down the session without reconnecting"""
        logger.info("Disconnecting from Steam...")
        self._user_initiated_disconnect = True
        self._cancel_auth_task()

        was_connected = self._transport.is_connected
        if was_connected or self._state is not SessionState.DISCONNECTED:
            await self._transport.disconnect()
        # A transport that never finished connecting may not report the close
        if not was_connected and self._state is not SessionState.DISCONNECTED:
            self.post(Disconnected(reason="disconnect requested"))

    def post(self, event: TransportEvent) -> None:
        """Queue a transport event for the dispatch loop

        Safe to call from transport threads other than the loop's.
        """
        loop = self._loop
        if loop is not None and loop.is_running():
            try:
                running = asyncio.get_running_loop()
            except RuntimeError:
                running = None
            if running is not loop:
                loop.call_soon_threadsafe(self._queue.put_nowait, event)
                return
        self._queue.put_nowait(event)

    async def run(self) -> None:
        """Process transport events until cancelled"""
        self._loop = asyncio.get_running_loop()
        logger.debug("Session dispatch loop started")
        try:
            while True:
                event = await self._queue.get()
                await self.handle(event)
        finally:
            logger.debug("Session dispatch loop stopped")

    async def run_once(self, timeout: float | None = 1.0) -> int:
        """Process queued events, waiting up to timeout for the first one

        Args:
            timeout: Seconds to wait when the queue is empty; 0 returns
                immediately, None waits indefinitely

        Returns:
            Number of events processed
        """
        self._loop = asyncio.get_running_loop()
        processed = 0
        if self._queue.empty():
            if timeout == 0:
                return 0
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout)
            except TimeoutError:
                return 0
            await self.handle(event)
            processed += 1

        while not self._queue.empty():
            await self.handle(self._queue.get_nowait())
            processed += 1
        return processed

    async def wait_for_state(
        self, state: SessionState, timeout: float | None = None
    ) -> None:
        """Wait until the session enters state

        Something must be running the dispatch loop meanwhile.

        Raises:
            TimeoutError: If the state is not reached in time
        """
        if self._state is state:
            return
        waiter = asyncio.get_running_loop().create_future()
        entry = (state, waiter)
        self._state_waiters.append(entry)
        try:
            await asyncio.wait_for(waiter, timeout)
        finally:
            if entry in self._state_waiters:
                self._state_waiters.remove(entry)

    # ---- event handling ----

    async def handle(self, event: TransportEvent) -> None:
        """Apply one transport event to the session"""
        try:
            if isinstance(event, MessageReceived):
                self._on_message(event.envelope)
            elif isinstance(event, Connected):
                await self._on_connected()
            elif isinstance(event, Disconnected):
                await self._on_disconnected(event)
            elif isinstance(event, LoggedOn):
                await self._on_logged_on(event)
            elif isinstance(event, InteractiveAuthCompleted):
                await self._on_interactive_auth_completed(event)
            else:
                logger.warning(f"Unknown transport event: {event!r}")
        except Exception as e:
            logger.opt(exception=e).error(
                f"Failed handling {type(event).__name__}: {e}"
            )

    def _on_message(self, envelope: Envelope) -> None:
        logger.debug(f"Received {envelope!r}")
        if self._correlator.resolve(envelope):
            return
        self._dispatcher.dispatch(envelope)

    async def _on_connected(self) -> None:
        if (
            self._user_initiated_disconnect
            or self._state is not SessionState.CONNECTING
        ):
            logger.debug(f"Connected ignored in state {self._state.value}")
            if self._user_initiated_disconnect and self._transport.is_connected:
                await self._transport.disconnect()
            return

        logger.info("Connected to Steam")

        credential = self._auth_manager.load_cached()
        if credential is None:
            self._set_state(SessionState.AUTHENTICATING_INTERACTIVE)
            self._auth_task = asyncio.create_task(self._authenticate_interactive())
            return

        self._set_state(SessionState.AUTHENTICATING_CACHED)
        await self._log_on(credential)

    async def _authenticate_interactive(self) -> None:
        try:
            credential = await self._auth_manager.authenticate_interactive()
        except AuthenticationError as e:
            self.post(InteractiveAuthCompleted(error=e))
            return
        except Exception as e:
            self.post(
                InteractiveAuthCompleted(
                    error=AuthenticationError(f"Interactive authentication failed: {e}")
                )
            )
            return
        self.post(InteractiveAuthCompleted(credential=credential))

    async def _on_interactive_auth_completed(
        self, event: InteractiveAuthCompleted
    ) -> None:
        self._auth_task = None
        if self._state is not SessionState.AUTHENTICATING_INTERACTIVE:
            logger.debug(f"Stale interactive auth result in {self._state.value}")
            return

        if event.error is not None or event.credential is None:
            error = event.error or AuthenticationError("No credential returned")
            await self._fail_authentication(error)
            return

        self._set_state(SessionState.AUTHENTICATING_CACHED)
        await self._log_on(event.credential)

    async def _log_on(self, credential: Credential) -> None:
        logger.info(f"Logging in as '{credential.account_name}'...")
        try:
            await self._transport.log_on(credential)
        except Exception as e:
            logger.warning(f"Logon request could not be sent: {e}")
            self.post(Disconnected(reason=f"logon send failed: {e}"))

    async def _on_logged_on(self, event: LoggedOn) -> None:
        if not self._state.is_authenticating:
            logger.debug(f"Logon result ignored in state {self._state.value}")
            return

        if event.result != EResult.OK:
            try:
                name = EResult(event.result).name
            except ValueError:
                name = str(event.result)
            await self._fail_authentication(
                AuthenticationError(
                    f"Unable to log on to Steam: {name}", result=event.result
                )
            )
            return

        self._account_id = event.account_id
        self._last_error = None
        logger.info("Logged in! Launching Deadlock")

        app_id = self._config.app_id
        games_played = GamesPlayed(games_played=[GamePlayed(game_id=app_id)])
        await self._transport.send(
            Envelope(
                msg_type=EMsg.CLIENT_GAMES_PLAYED,
                payload=self._codec.encode(games_played),
            )
        )

        await asyncio.sleep(self._config.hello_delay_seconds)

        hello = ClientHello(region_mode=self._config.region_mode)
        await self._transport.send(
            Envelope(
                msg_type=GCMsg.CLIENT_HELLO,
                payload=self._codec.encode(hello),
                app_id=app_id,
            )
        )
        self._set_state(SessionState.LOGGED_ON)

    async def _fail_authentication(self, error: AuthenticationError) -> None:
        logger.error(str(error))
        self._last_error = error
        self._user_initiated_disconnect = True
        self._cancel_auth_task()
        self._close_pending_jobs()
        self._set_state(SessionState.DISCONNECTED, error)
        if self._transport.is_connected:
            await self._transport.disconnect()

    async def _on_disconnected(self, event: Disconnected) -> None:
        self._cancel_auth_task()
        self._close_pending_jobs()
        self._account_id = None

        if self._user_initiated_disconnect:
            logger.info("Disconnected from Steam")
            self._set_state(SessionState.DISCONNECTED)
            return

        delay = self._config.reconnect_delay_seconds
        error = TransportDroppedError(event.reason or "Connection dropped")
        self._last_error = error
        logger.warning(f"Disconnected :( Trying again in {delay}s")
        self._set_state(SessionState.DISCONNECTED, error)

        await asyncio.sleep(delay)

        if self._user_initiated_disconnect:
            logger.info("Reconnect abandoned after disconnect()")
            return
        await self.connect()

    def on_client_welcome(self, welcome: ClientWelcome) -> None:
        """Record the coordinator's advertised version and go ACTIVE"""
        self._client_version = welcome.version
        logger.info(f"Coordinator welcome, client version {welcome.version}")
        if self._state in (SessionState.LOGGED_ON, SessionState.ACTIVE):
            self._set_state(SessionState.ACTIVE)
        self._events.publish(ClientWelcomeEvent(data=welcome))

    # ---- helpers ----

    def _close_pending_jobs(self) -> None:
        self._correlator.fail_all(
            lambda: SessionClosedError("Session closed before a reply arrived")
        )

    def _cancel_auth_task(self) -> None:
        task = self._auth_task
        self._auth_task = None
        if task is not None and not task.done():
            task.cancel()

    def _set_state(
        self, state: SessionState, error: Exception | None = None
    ) -> None:
        previous = self._state
        if previous is state and error is None:
            return
        self._state = state
        logger.debug(f"Session state {previous.value} -> {state.value}")

        for entry in list(self._state_waiters):
            wanted, waiter = entry
            if wanted is state and not waiter.done():
                waiter.set_result(None)
                self._state_waiters.remove(entry)

        self._events.publish(
            SessionStateChanged(previous=previous, current=state, error=error)
        )
