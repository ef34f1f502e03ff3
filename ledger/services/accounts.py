"""
Account Service

Registration and password verification.

Passwords are stored as unsalted SHA-256 hex digests. That keeps
plaintext off disk and nothing more. This is a local, single-user tool,
not a security boundary.
"""

import hashlib
import hmac
from typing import Optional

from pydantic import ValidationError

from ledger.config import AppSettings, get_settings
from ledger.models.account import UserAccount
from ledger.observability import get_logger
from ledger.services.storage import AccountDirectoryInterface, DuplicateError


logger = get_logger(__name__)


class AuthError(Exception):
    """Base exception for account operations."""
    pass


class AuthenticationError(AuthError):
    """Unknown login or wrong password."""
    pass


class RegistrationError(AuthError):
    """Login taken or not acceptable."""
    pass


def hash_password(password: str) -> str:
    """SHA-256 hex digest of a password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class AccountService:
    """Registers users and checks their credentials against the directory."""

    def __init__(
        self,
        directory: AccountDirectoryInterface,
        settings: Optional[AppSettings] = None,
    ):
        self._directory = directory
        self._settings = settings or get_settings().app

    @property
    def directory(self) -> AccountDirectoryInterface:
        return self._directory

    def account_exists(self, login: str) -> bool:
        return self._directory.resolve_account(login)

    def register(self, login: str, password: str) -> UserAccount:
        """
        Create an account and persist the registry immediately.

        Raises:
            RegistrationError: If the login is taken or invalid, or the
                               password is too short
        """
        if len(password) < self._settings.min_password_length:
            raise RegistrationError(
                f"Password must be at least {self._settings.min_password_length} characters"
            )

        try:
            account = UserAccount(login=login, password_hash=hash_password(password))
        except ValidationError:
            raise RegistrationError(
                "Login may only contain letters, digits, '_', '.' and '-' (1-64 characters)"
            )

        try:
            self._directory.add_account(account)
        except DuplicateError:
            raise RegistrationError(f"User with login '{account.login}' already exists")

        if not self._directory.save():
            logger.warning("registry_not_persisted", login=account.login)
        logger.info("account_registered", login=account.login)
        return account

    def authenticate(self, login: str, password: str) -> UserAccount:
        """
        Check credentials.

        Raises:
            AuthenticationError: If the login is unknown or the password is wrong
        """
        account = self._directory.get_account(login)
        if account is None:
            logger.info("login_unknown_account", login=login)
            raise AuthenticationError(f"User '{login}' not found")

        if not hmac.compare_digest(account.password_hash, hash_password(password)):
            logger.warning("login_wrong_password", login=login)
            raise AuthenticationError("Wrong password")

        logger.info("login_succeeded", login=login)
        return account
