"""Services package."""

from ledger.services.storage import (
    AccountDirectoryInterface,
    DuplicateError,
    FileStorageClient,
    InMemoryAccountDirectory,
    InMemoryWalletStorage,
    JsonFileAccountDirectory,
    JsonFileWalletStorage,
    NotFoundError,
    StorageError,
    WalletStorageInterface,
)
from ledger.services.accounts import (
    AccountService,
    AuthenticationError,
    AuthError,
    RegistrationError,
    hash_password,
)

__all__ = [
    # Account services
    "AccountService",
    "AuthenticationError",
    "AuthError",
    "RegistrationError",
    "hash_password",
    # Storage services
    "AccountDirectoryInterface",
    "DuplicateError",
    "FileStorageClient",
    "InMemoryAccountDirectory",
    "InMemoryWalletStorage",
    "JsonFileAccountDirectory",
    "JsonFileWalletStorage",
    "NotFoundError",
    "StorageError",
    "WalletStorageInterface",
]
