"""
Abstract Storage Interface

DESIGN DECISION: The engine only ever talks to these two interfaces.
This allows us to:
1. Swap flat files for a real database later
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally narrow: resolve an account, load a wallet,
save a wallet. Storage is synchronous; every call completes before the
next command is accepted.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ledger.models.account import UserAccount
from ledger.models.wallet import Wallet


class AccountDirectoryInterface(ABC):
    """
    Registry of known accounts.

    Passed into the engine explicitly; there is no process-wide user map.
    """

    @abstractmethod
    def resolve_account(self, login: str) -> bool:
        """
        Check whether an account exists.

        Args:
            login: The account's login

        Returns:
            True if the account is registered
        """
        pass

    @abstractmethod
    def get_account(self, login: str) -> Optional[UserAccount]:
        """
        Retrieve an account by login.

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    def add_account(self, account: UserAccount) -> None:
        """
        Register a new account (in memory until save() is called).

        Raises:
            DuplicateError: If the login is already taken
        """
        pass

    @abstractmethod
    def list_logins(self) -> list[str]:
        """All registered logins, in registration order."""
        pass

    @abstractmethod
    def save(self) -> bool:
        """
        Persist the registry.

        Returns:
            True if saved; False if the write failed (failure is logged,
            never raised)
        """
        pass


class WalletStorageInterface(ABC):
    """
    Per-account wallet persistence.

    Implementations absorb their own failures: a caller always gets a
    usable wallet back and is never interrupted by an exception.
    """

    @abstractmethod
    def load_wallet(self, login: str) -> Wallet:
        """
        Load a freshly hydrated wallet.

        Args:
            login: The owning account's login

        Returns:
            The stored wallet, or a new empty wallet when none exists
            or the stored one cannot be read
        """
        pass

    @abstractmethod
    def save_wallet(self, login: str, wallet: Wallet) -> bool:
        """
        Persist a wallet (best-effort).

        Returns:
            True if saved; False if the write failed
        """
        pass

    @abstractmethod
    def wallet_exists(self, login: str) -> bool:
        """Whether a wallet has ever been saved for this account."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
