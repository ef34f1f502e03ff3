"""Shared fixtures: in-memory storage with two registered users."""

import pytest

from ledger.config import AppSettings, StorageSettings
from ledger.engine import LedgerEngine
from ledger.models.account import UserAccount
from ledger.services.accounts import hash_password
from ledger.services.storage import InMemoryAccountDirectory, InMemoryWalletStorage


@pytest.fixture
def app_settings():
    return AppSettings()


@pytest.fixture
def storage_settings(tmp_path):
    return StorageSettings(
        data_dir=tmp_path / "data",
        write_retry_attempts=1,
        write_retry_wait_seconds=0,
    )


@pytest.fixture
def directory():
    return InMemoryAccountDirectory([
        UserAccount(login="alice", password_hash=hash_password("secret")),
        UserAccount(login="bob", password_hash=hash_password("hunter2")),
    ])


@pytest.fixture
def wallet_storage():
    return InMemoryWalletStorage()


@pytest.fixture
def engine(wallet_storage, directory, app_settings):
    return LedgerEngine("alice", wallet_storage, directory, app_settings)
