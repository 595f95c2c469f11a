"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, and the result types each account flow returns.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from .models import Account, AccountUpdate, NewAccount


class RegisterResult(Enum):
    """Result of a registration attempt."""

    SUCCESS = "success"
    ALREADY_EXISTS = "already_exists"
    DELIVERY_FAILED = "delivery_failed"
    INTERNAL_ERROR = "internal_error"


class VerifyResult(Enum):
    """
    Result of an email verification attempt.

    NOT_FOUND and INVALID_CODE are deliberately distinct: the lookup
    by email happens before the lookup by email and code.
    ALREADY_VERIFIED is returned for accounts whose code was already
    consumed, instead of folding it into INVALID_CODE.
    """

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    INVALID_CODE = "invalid_code"
    EXPIRED = "expired"
    ALREADY_VERIFIED = "already_verified"
    INTERNAL_ERROR = "internal_error"


class ResendResult(Enum):
    """Result of a verification code reissue."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    ALREADY_VERIFIED = "already_verified"
    DELIVERY_FAILED = "delivery_failed"
    INTERNAL_ERROR = "internal_error"


class LoginStatus(Enum):
    """Status of a login attempt."""

    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_NOT_VERIFIED = "email_not_verified"
    INTERNAL_ERROR = "internal_error"


@dataclass(frozen=True)
class LoginResult:
    """Login outcome; access_token is set only on SUCCESS."""

    status: LoginStatus
    access_token: str | None = None


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def find_by_email(self, email: str) -> Account | None:
        """Return the account with this normalized email, if any."""
        ...

    def find_by_email_and_code(self, email: str, code: str) -> Account | None:
        """Return the account whose email and current verification code both match."""
        ...

    def find_by_id(self, account_id: str) -> Account | None:
        """Return the account with this identifier, if any."""
        ...

    def create(self, account: NewAccount) -> Account:
        """
        Persist a new unverified account.

        Raises:
            EmailAlreadyRegistered: If the email is already stored
        """
        ...

    def update_by_id(self, account_id: str, update: AccountUpdate) -> Account:
        """Write verification state for one account and return the stored result."""
        ...

    def reissue_code(self, account_id: str, code: str, expires_at: datetime) -> Account | None:
        """
        Replace the code and expiry of an unverified account.

        The verified check and the write are one atomic step. Returns None,
        writing nothing, when no unverified account has this identifier.
        """
        ...


class PasswordHasher(Protocol):
    """Port interface for one-way password hashing."""

    def hash(self, password: str) -> str:
        """Return a salted hash of the password."""
        ...

    def verify(self, password: str, password_hash: str) -> bool:
        """Check a password against a stored hash in constant time."""
        ...

    def verify_dummy(self, password: str) -> None:
        """Spend one verification against a fixed hash (timing equalization)."""
        ...


class TokenIssuer(Protocol):
    """Port interface for bearer token signing."""

    def issue(self, account_id: str) -> str:
        """Return a signed token asserting the account identifier."""
        ...

    def verify(self, token: str) -> str | None:
        """Return the account identifier, or None if the token is not valid."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_code(self, email: str, code: str) -> None:
        """
        Send verification code to email address.

        Args:
            email: Recipient email address
            code: 6-digit verification code

        Raises:
            NotificationError: If delivery failed
        """
        ...
