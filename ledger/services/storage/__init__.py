"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
JSON files are the production backend; the in-memory backend serves tests.
"""

from ledger.services.storage.interface import (
    AccountDirectoryInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
    WalletStorageInterface,
)
from ledger.services.storage.file_storage import (
    FileStorageClient,
    JsonFileAccountDirectory,
    JsonFileWalletStorage,
)
from ledger.services.storage.memory import (
    InMemoryAccountDirectory,
    InMemoryWalletStorage,
)

__all__ = [
    # Interfaces
    "AccountDirectoryInterface",
    "WalletStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    # File implementation
    "FileStorageClient",
    "JsonFileAccountDirectory",
    "JsonFileWalletStorage",
    # In-memory implementation
    "InMemoryAccountDirectory",
    "InMemoryWalletStorage",
]
