"""
Account entity and value objects.

The Account is the persisted identity record for one registered user.
Code fields come in pairs: verification_code and
verification_code_expires_at are either both set or both None.
"""

from dataclasses import dataclass
from datetime import datetime


def normalize_email(email: str) -> str:
    """Strip surrounding whitespace and lowercase an email address."""
    return email.strip().lower()


@dataclass(frozen=True)
class Account:
    """Stored account record."""

    id: str
    full_name: str
    email: str
    password_hash: str
    is_email_verified: bool
    verification_code: str | None
    verification_code_expires_at: datetime | None
    created_at: datetime


@dataclass(frozen=True)
class NewAccount:
    """Fields required to create an account."""

    full_name: str
    email: str
    password_hash: str
    verification_code: str
    verification_code_expires_at: datetime


@dataclass(frozen=True)
class AccountUpdate:
    """Mutable account fields written by update_by_id."""

    is_email_verified: bool
    verification_code: str | None
    verification_code_expires_at: datetime | None

    def __post_init__(self) -> None:
        if (self.verification_code is None) != (self.verification_code_expires_at is None):
            raise ValueError("verification code and expiry must be set together")
