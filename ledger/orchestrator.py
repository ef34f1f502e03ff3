"""
Main Orchestrator for Finance Ledger

Ties the components together and defines the two flows a front end uses:
1. Authentication (login or register → open a session)
2. Session (one call per menu command → structured result)

DESIGN DECISION: The session is a request/response boundary.
Each user command maps to exactly one engine call, and every rejected
command comes back as a failure outcome instead of an exception, so a
front end can show the message and re-prompt without ever crashing.
The only state a session holds is the engine and its loaded wallet.
"""

from enum import Enum
from typing import Callable, Optional
from uuid import UUID

from ledger.config import AppSettings, StorageSettings, get_settings
from ledger.engine import LedgerEngine, LedgerError
from ledger.models.account import UserAccount
from ledger.models.outcome import (
    CategoryReport,
    LedgerOutcome,
    Notice,
    NoticeKind,
    OverallStats,
)
from ledger.observability import (
    bind_session,
    clear_session,
    configure_logging,
    create_session_id,
    get_logger,
)
from ledger.services.accounts import AccountService, AuthError
from ledger.services.storage import (
    AccountDirectoryInterface,
    FileStorageClient,
    InMemoryAccountDirectory,
    InMemoryWalletStorage,
    JsonFileAccountDirectory,
    JsonFileWalletStorage,
    WalletStorageInterface,
)


logger = get_logger(__name__)


class Command(str, Enum):
    """
    Menu commands, keyed by the code the user types.
    """
    ADD_INCOME = "1"
    ADD_EXPENSE = "2"
    SET_CATEGORY_BUDGET = "3"
    LIST_CATEGORIES = "4"
    SHOW_OVERALL_STATS = "5"
    SHOW_CATEGORY_STATS = "6"
    TRANSFER_FUNDS = "7"
    EXIT = "8"
    UNKNOWN = ""

    @classmethod
    def from_code(cls, code: str) -> 'Command':
        """Look up a command by its menu code; anything else is UNKNOWN."""
        code = code.strip()
        for command in cls:
            if command is not cls.UNKNOWN and command.value == code:
                return command
        return cls.UNKNOWN


class LedgerSession:
    """
    One authenticated user's session.

    Flow:
    1. Session opens → wallet loaded once
    2. Commands → engine calls, each returning a structured result
    3. close() → wallet and registry persisted
    """

    def __init__(
        self,
        account: UserAccount,
        engine: LedgerEngine,
        directory: AccountDirectoryInterface,
        session_id: Optional[UUID] = None,
    ):
        self._account = account
        self._engine = engine
        self._directory = directory
        self._session_id = session_id or create_session_id()
        self._closed = False
        bind_session(self._session_id, account.login)
        logger.info("session_opened")

    @property
    def account(self) -> UserAccount:
        return self._account

    @property
    def engine(self) -> LedgerEngine:
        return self._engine

    @property
    def session_id(self) -> UUID:
        return self._session_id

    @property
    def is_closed(self) -> bool:
        return self._closed

    def _run(
        self,
        command: Command,
        action: Callable[[], LedgerOutcome],
    ) -> LedgerOutcome:
        try:
            return action()
        except LedgerError as e:
            logger.info(
                "command_rejected",
                command=command.name,
                error_code=e.error_code,
                reason=str(e),
            )
            return LedgerOutcome.failure(str(e), error_code=e.error_code)

    def add_income(self, description: str, amount) -> LedgerOutcome:
        return self._run(
            Command.ADD_INCOME,
            lambda: self._engine.record_income(description, amount),
        )

    def add_expense(
        self,
        description: str,
        amount,
        category_name: str,
    ) -> LedgerOutcome:
        return self._run(
            Command.ADD_EXPENSE,
            lambda: self._engine.record_expense(description, amount, category_name),
        )

    def set_category_budget(self, category_name: str, limit) -> LedgerOutcome:
        return self._run(
            Command.SET_CATEGORY_BUDGET,
            lambda: self._engine.set_category_budget(category_name, limit),
        )

    def list_categories(self) -> CategoryReport:
        return self._engine.list_categories()

    def overall_statistics(self) -> OverallStats:
        return self._engine.overall_statistics()

    def category_statistics(self) -> CategoryReport:
        return self._engine.category_statistics()

    def transfer_funds(
        self,
        recipient_login: str,
        description: str,
        amount,
    ) -> LedgerOutcome:
        return self._run(
            Command.TRANSFER_FUNDS,
            lambda: self._engine.transfer(recipient_login, description, amount),
        )

    def close(self) -> LedgerOutcome:
        """
        Persist the wallet and the registry and end the session.

        Save failures are reported as notices; the session closes anyway.
        """
        notices = []
        if not self._engine.save():
            notices.append(Notice(
                kind=NoticeKind.SAVE_FAILED,
                message="Could not save your wallet",
            ))
        if not self._directory.save():
            notices.append(Notice(
                kind=NoticeKind.SAVE_FAILED,
                message="Could not save the user registry",
            ))

        self._closed = True
        logger.info("session_closed", saved=not notices)
        clear_session()

        message = "Data saved. Goodbye!" if not notices else "Session closed with errors."
        return LedgerOutcome.success(message, notices=notices)


class AuthFlow:
    """
    Orchestrates login and registration, and opens sessions.

    Methods return (account, message); account is None on failure.
    """

    def __init__(
        self,
        account_service: AccountService,
        wallet_storage: WalletStorageInterface,
        settings: Optional[AppSettings] = None,
    ):
        self._accounts = account_service
        self._wallet_storage = wallet_storage
        self._settings = settings or get_settings().app

    def account_exists(self, login: str) -> bool:
        return self._accounts.account_exists(login)

    def login(
        self,
        login: str,
        password: str,
    ) -> tuple[Optional[UserAccount], str]:
        try:
            account = self._accounts.authenticate(login, password)
        except AuthError as e:
            return None, str(e)
        return account, f"Welcome back, {account.login}!"

    def register(
        self,
        login: str,
        password: str,
    ) -> tuple[Optional[UserAccount], str]:
        try:
            account = self._accounts.register(login, password)
        except AuthError as e:
            return None, str(e)
        return account, "Registration successful."

    def open_session(self, account: UserAccount) -> LedgerSession:
        engine = LedgerEngine(
            account_id=account.login,
            wallet_storage=self._wallet_storage,
            account_directory=self._accounts.directory,
            settings=self._settings,
        )
        return LedgerSession(
            account=account,
            engine=engine,
            directory=self._accounts.directory,
        )


def create_app_components(
    use_files: bool = True,
    storage_settings: Optional[StorageSettings] = None,
    app_settings: Optional[AppSettings] = None,
) -> AuthFlow:
    """
    Factory function to create all application components.

    Args:
        use_files: Whether to persist to JSON files.
                   Set to False for an in-memory, throwaway ledger.
        storage_settings: Override storage settings (defaults to env)
        app_settings: Override app settings (defaults to env)

    Returns:
        The auth flow, from which sessions are opened
    """
    app_settings = app_settings or get_settings().app
    configure_logging(app_settings.log_level, app_settings.log_format)

    if use_files:
        client = FileStorageClient(storage_settings or get_settings().storage)
        directory = JsonFileAccountDirectory(client)
        wallet_storage = JsonFileWalletStorage(client)
        logger.debug("file_storage_ready", data_dir=str(client.settings.data_dir))
    else:
        directory = InMemoryAccountDirectory()
        wallet_storage = InMemoryWalletStorage()

    account_service = AccountService(directory, app_settings)
    return AuthFlow(account_service, wallet_storage, app_settings)
