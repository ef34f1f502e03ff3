"""Registered account model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserAccount(BaseModel):
    """
    A registered user.

    The login doubles as the key of the wallet file, so it is restricted
    to characters that are safe in a file name.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    login: str = Field(
        ...,
        min_length=1,
        max_length=64,
        pattern=r"^[A-Za-z0-9_.\-]+$",
        description="Unique login"
    )
    password_hash: str = Field(
        ...,
        min_length=1,
        description="Hex digest of the password"
    )
    created_at: datetime = Field(
        default_factory=datetime.now
    )
