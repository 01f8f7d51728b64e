"""Tests for AuthManager"""

import pytest

from deadlock_gc.domain.models import Credential
from deadlock_gc.infrastructure.coordinator import AuthManager
from deadlock_gc.infrastructure.credentials import MemoryCredentialStore
from deadlock_gc.shared.exceptions import AuthenticationError
from tests.factories import FakeAuthenticator, RecordingPresenter

ALICE = Credential(account_name="alice", refresh_token="T1")


@pytest.mark.unit
def test_load_cached_reads_store_each_time():
    store = MemoryCredentialStore()
    auth = AuthManager(store, None, RecordingPresenter())

    assert auth.load_cached() is None
    store.save(ALICE)
    assert auth.load_cached() == ALICE
    assert auth.credential == ALICE


@pytest.mark.unit
@pytest.mark.asyncio
async def test_interactive_success_saves_and_presents_every_challenge():
    store = MemoryCredentialStore()
    presenter = RecordingPresenter()
    seen: list[str] = []
    authenticator = FakeAuthenticator(
        ALICE, refreshed_urls=("https://s.team/q/1/second",)
    )
    auth = AuthManager(store, authenticator, presenter, on_challenge=seen.append)

    credential = await auth.authenticate_interactive()

    assert credential == ALICE
    assert store.load() == ALICE
    assert presenter.challenges == [
        "https://s.team/q/1/first",
        "https://s.team/q/1/second",
    ]
    assert seen == presenter.challenges


@pytest.mark.unit
@pytest.mark.asyncio
async def test_interactive_failure_is_wrapped_and_nothing_saved():
    store = MemoryCredentialStore()
    authenticator = FakeAuthenticator(error=TimeoutError("expired"))
    auth = AuthManager(store, authenticator, RecordingPresenter())

    with pytest.raises(AuthenticationError, match="expired"):
        await auth.authenticate_interactive()

    assert store.load() is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_interactive_without_authenticator_fails():
    auth = AuthManager(MemoryCredentialStore(), None, RecordingPresenter())

    with pytest.raises(AuthenticationError):
        await auth.authenticate_interactive()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_interactive_save_failure_raises_authentication_error(mocker):
    store = MemoryCredentialStore()
    mocker.patch.object(store, "save", side_effect=OSError("disk full"))
    auth = AuthManager(store, FakeAuthenticator(ALICE), RecordingPresenter())

    with pytest.raises(AuthenticationError, match="disk full"):
        await auth.authenticate_interactive()

    assert auth.credential is None
