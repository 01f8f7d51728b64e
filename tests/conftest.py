"""Pytest fixtures for deadlock-gc tests"""

import sys
from pathlib import Path

import pytest

# Add src to Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from deadlock_gc.core.config import ClientConfig  # noqa: E402
from deadlock_gc.domain.models import Credential, GCMsg, SessionState  # noqa: E402
from deadlock_gc.domain.models.messages import ClientWelcome  # noqa: E402
from deadlock_gc.infrastructure.coordinator import DeadlockClient  # noqa: E402
from deadlock_gc.infrastructure.credentials import MemoryCredentialStore  # noqa: E402

from tests.factories import FakeAuthenticator, FakeTransport, RecordingPresenter  # noqa: E402


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    """Config with lifecycle delays removed and no reply timeout"""
    return ClientConfig(
        reconnect_delay_seconds=0.0,
        hello_delay_seconds=0.0,
        reply_timeout_seconds=None,
        credential_dir=str(tmp_path),
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def cached_store() -> MemoryCredentialStore:
    return MemoryCredentialStore(Credential(account_name="bob", refresh_token="T2"))


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def authenticator() -> FakeAuthenticator:
    return FakeAuthenticator(Credential(account_name="alice", refresh_token="T1"))


@pytest.fixture
def client(transport, cached_store, presenter, authenticator, config) -> DeadlockClient:
    """Client with a cached credential"""
    return DeadlockClient(
        transport,
        authenticator=authenticator,
        credential_store=cached_store,
        presenter=presenter,
        config=config,
    )


@pytest.fixture
def activate():
    """Bring a client to ACTIVE: connect, log on, receive the welcome"""

    async def _activate(client: DeadlockClient, transport: FakeTransport, version: int = 123):
        await client.connect()
        await client.run_once(0)
        assert client.state is SessionState.LOGGED_ON
        transport.push(GCMsg.CLIENT_WELCOME, ClientWelcome(version=version))
        await client.run_once(0)
        assert client.state is SessionState.ACTIVE

    return _activate
