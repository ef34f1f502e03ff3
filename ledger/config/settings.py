"""
Configuration Management for Finance Ledger

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Data locations, retry behaviour and user-facing labels live in one place
and are validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Flat-file storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path("data"),
        description="Directory holding the user registry and wallet files"
    )
    users_file_name: str = Field(
        default="users.json",
        description="File name of the user registry"
    )
    wallet_file_pattern: str = Field(
        default="wallet_{login}.json",
        description="File name pattern for per-account wallets"
    )

    # Write retries (transient filesystem errors)
    write_retry_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="How many times a file write is attempted"
    )
    write_retry_wait_seconds: float = Field(
        default=0.5,
        ge=0.0,
        le=30.0,
        description="Base wait between write attempts (exponential backoff)"
    )

    @field_validator('wallet_file_pattern')
    @classmethod
    def validate_wallet_file_pattern(cls, v: str) -> str:
        """The pattern must place the login in the file name."""
        if "{login}" not in v:
            raise ValueError("wallet_file_pattern must contain '{login}'")
        return v

    @property
    def users_file(self) -> Path:
        return self.data_dir / self.users_file_name

    def wallet_file(self, login: str) -> Path:
        """Path of the wallet file for an account."""
        return self.data_dir / self.wallet_file_pattern.format(login=login)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Logging
    log_level: str = Field(
        default="WARNING",
        description="Minimum level for structured log output"
    )
    log_format: str = Field(
        default="console",
        pattern="^(json|console)$",
        description="Render logs as JSON lines or human-readable console output"
    )

    # Transfer labels
    transfer_category_template: str = Field(
        default="Transfer to {recipient}",
        description="Expense category used on the sender side of a transfer"
    )
    transfer_income_template: str = Field(
        default="Transfer from {sender}",
        description="Income description used on the recipient side of a transfer"
    )

    # Accounts
    min_password_length: int = Field(
        default=1,
        ge=1,
        le=128,
        description="Minimum password length accepted at registration"
    )

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an extra
    "<name>_error" entry for every section that failed.
    """
    results = {}

    settings = get_settings()

    try:
        _ = settings.storage
        results["storage"] = True
    except Exception as e:
        results["storage"] = False
        results["storage_error"] = str(e)

    try:
        _ = settings.app
        results["app"] = True
    except Exception as e:
        results["app"] = False
        results["app_error"] = str(e)

    return results
