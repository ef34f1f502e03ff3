"""
JSON File Storage Implementation

DESIGN DECISION: Plain JSON files are the storage backend because:
1. Users can inspect (and back up) their data with any text editor
2. No database setup required
3. One file per wallet keeps accounts independent of each other

TRADEOFFS:
- No transactions across files (a transfer writes two files in sequence)
- Whole-file rewrites on every save (fine for personal-scale data)

Writes are atomic: content goes to a temporary file in the same
directory which then replaces the target, so a crash mid-write never
leaves a truncated wallet behind.

The implementation follows the abstract interface, so we can swap
to SQLite later without changing business logic.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.config import StorageSettings, get_settings
from ledger.models.account import UserAccount
from ledger.models.wallet import Wallet
from ledger.observability import get_logger
from ledger.services.storage.interface import (
    AccountDirectoryInterface,
    DuplicateError,
    NotFoundError,
    StorageError,
    WalletStorageInterface,
)


logger = get_logger(__name__)


class AccountRegistry(BaseModel):
    """On-disk shape of the user registry."""

    accounts: dict[str, UserAccount] = Field(default_factory=dict)


class FileStorageClient:
    """
    Low-level file access.

    Handles directory creation, atomic replacement and retry logic for
    transient filesystem errors.
    """

    def __init__(self, settings: Optional[StorageSettings] = None):
        self._settings = settings or get_settings().storage

    @property
    def settings(self) -> StorageSettings:
        return self._settings

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._settings.write_retry_attempts),
            wait=wait_exponential(
                multiplier=self._settings.write_retry_wait_seconds,
                max=10,
            ),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def read_text(self, path: Path) -> str:
        """
        Read a whole file.

        Raises:
            NotFoundError: If the file does not exist
            StorageError: If it exists but cannot be read
        """
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(f"File not found: {path}")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def _write_once(self, path: Path, content: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except Exception:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def write_text(self, path: Path, content: str) -> None:
        """
        Atomically replace a file's content, retrying transient errors.

        Raises:
            StorageError: If every attempt failed
        """
        try:
            self._retrying()(self._write_once, path, content)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

    def exists(self, path: Path) -> bool:
        return path.is_file()


class JsonFileAccountDirectory(AccountDirectoryInterface):
    """
    User registry kept in a single JSON file.

    The registry is read once at construction. A missing file means no
    users yet; an unreadable one is logged and treated the same way.
    """

    def __init__(self, client: Optional[FileStorageClient] = None):
        self._client = client or FileStorageClient()
        self._path = self._client.settings.users_file
        self._registry = self._load()

    def _load(self) -> AccountRegistry:
        try:
            raw = self._client.read_text(self._path)
        except NotFoundError:
            return AccountRegistry()
        except StorageError as e:
            logger.warning("registry_load_failed", path=str(self._path), error=str(e))
            return AccountRegistry()

        try:
            return AccountRegistry.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "registry_corrupt",
                path=str(self._path),
                error_count=e.error_count(),
            )
            return AccountRegistry()

    def resolve_account(self, login: str) -> bool:
        return login in self._registry.accounts

    def get_account(self, login: str) -> Optional[UserAccount]:
        return self._registry.accounts.get(login)

    def add_account(self, account: UserAccount) -> None:
        if account.login in self._registry.accounts:
            raise DuplicateError(f"Account already exists: {account.login}")
        self._registry.accounts[account.login] = account

    def list_logins(self) -> list[str]:
        return list(self._registry.accounts)

    def save(self) -> bool:
        try:
            self._client.write_text(
                self._path,
                self._registry.model_dump_json(indent=2),
            )
        except StorageError as e:
            logger.error("registry_save_failed", path=str(self._path), error=str(e))
            return False
        logger.debug("registry_saved", accounts=len(self._registry.accounts))
        return True


class JsonFileWalletStorage(WalletStorageInterface):
    """
    One JSON file per wallet.

    Every load reads the file again, so callers always get a fresh
    instance that shares nothing with wallets loaded earlier.
    """

    def __init__(self, client: Optional[FileStorageClient] = None):
        self._client = client or FileStorageClient()

    def _path(self, login: str) -> Path:
        return self._client.settings.wallet_file(login)

    def load_wallet(self, login: str) -> Wallet:
        path = self._path(login)
        try:
            raw = self._client.read_text(path)
        except NotFoundError:
            return Wallet()
        except StorageError as e:
            logger.warning("wallet_load_failed", login=login, error=str(e))
            return Wallet()

        try:
            return Wallet.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "wallet_corrupt",
                login=login,
                path=str(path),
                error_count=e.error_count(),
            )
            return Wallet()

    def save_wallet(self, login: str, wallet: Wallet) -> bool:
        path = self._path(login)
        try:
            self._client.write_text(path, wallet.model_dump_json(indent=2))
        except StorageError as e:
            logger.error("wallet_save_failed", login=login, error=str(e))
            return False
        logger.debug("wallet_saved", login=login, operations=len(wallet.operations))
        return True

    def wallet_exists(self, login: str) -> bool:
        return self._client.exists(self._path(login))
