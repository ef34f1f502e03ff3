"""
In-Memory Storage

Used by tests and throwaway sessions. Wallets are kept as serialized
JSON so that, exactly like the file backend, every load hands out an
independent copy.
"""

from typing import Optional

from ledger.models.account import UserAccount
from ledger.models.wallet import Wallet
from ledger.services.storage.interface import (
    AccountDirectoryInterface,
    DuplicateError,
    WalletStorageInterface,
)


class InMemoryAccountDirectory(AccountDirectoryInterface):

    def __init__(self, accounts: Optional[list[UserAccount]] = None):
        self._accounts: dict[str, UserAccount] = {}
        for account in accounts or []:
            self.add_account(account)
        self.save_count = 0

    def resolve_account(self, login: str) -> bool:
        return login in self._accounts

    def get_account(self, login: str) -> Optional[UserAccount]:
        return self._accounts.get(login)

    def add_account(self, account: UserAccount) -> None:
        if account.login in self._accounts:
            raise DuplicateError(f"Account already exists: {account.login}")
        self._accounts[account.login] = account

    def list_logins(self) -> list[str]:
        return list(self._accounts)

    def save(self) -> bool:
        self.save_count += 1
        return True


class InMemoryWalletStorage(WalletStorageInterface):
    """
    Args:
        fail_saves: Make every save report failure (for exercising
                    the best-effort save path)
    """

    def __init__(self, fail_saves: bool = False):
        self._wallets: dict[str, str] = {}
        self.fail_saves = fail_saves
        self.saved_logins: list[str] = []

    def load_wallet(self, login: str) -> Wallet:
        raw = self._wallets.get(login)
        if raw is None:
            return Wallet()
        return Wallet.model_validate_json(raw)

    def save_wallet(self, login: str, wallet: Wallet) -> bool:
        if self.fail_saves:
            return False
        self._wallets[login] = wallet.model_dump_json()
        self.saved_logins.append(login)
        return True

    def wallet_exists(self, login: str) -> bool:
        return login in self._wallets
