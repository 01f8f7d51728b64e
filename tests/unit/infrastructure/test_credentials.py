"""Tests for credential stores"""

import pytest

from deadlock_gc.domain.models import Credential
from deadlock_gc.infrastructure.credentials import FileCredentialStore, MemoryCredentialStore

ALICE = Credential(account_name="alice", refresh_token="T1")


@pytest.mark.unit
class TestFileCredentialStore:
    def test_missing_files_load_as_none(self, tmp_path):
        assert FileCredentialStore(tmp_path).load() is None

    def test_save_then_load(self, tmp_path):
        store = FileCredentialStore(tmp_path / "creds")
        store.save(ALICE)

        assert (tmp_path / "creds" / ".username").read_text() == "alice"
        assert (tmp_path / "creds" / ".token").read_text() == "T1"
        assert FileCredentialStore(tmp_path / "creds").load() == ALICE

    def test_save_overwrites(self, tmp_path):
        store = FileCredentialStore(tmp_path)
        store.save(ALICE)
        store.save(Credential(account_name="bob", refresh_token="T2"))

        assert store.load() == Credential(account_name="bob", refresh_token="T2")

    def test_empty_token_loads_as_none(self, tmp_path):
        (tmp_path / ".username").write_text("alice")
        (tmp_path / ".token").write_text("\n")

        assert FileCredentialStore(tmp_path).load() is None

    def test_surrounding_whitespace_is_stripped(self, tmp_path):
        (tmp_path / ".username").write_text("alice\n")
        (tmp_path / ".token").write_text("T1\n")

        assert FileCredentialStore(tmp_path).load() == ALICE


@pytest.mark.unit
def test_memory_store_round_trip():
    store = MemoryCredentialStore()
    assert store.load() is None

    store.save(ALICE)
    assert store.load() == ALICE


@pytest.mark.unit
def test_credential_repr_hides_token():
    assert "T1" not in repr(ALICE)
