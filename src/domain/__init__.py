"""
Domain layer - Business logic with zero web framework imports.

This package contains the core business logic for the account credential
lifecycle. It defines its own port interfaces for infrastructure
abstraction, keeping adapters swappable.
"""

from .accounts import AccountService
from .codes import generate_verification_code
from .exceptions import AccountError, EmailAlreadyRegistered, NotificationError
from .models import Account, AccountUpdate, NewAccount, normalize_email
from .passwords import MAX_PASSWORD_BYTES, BcryptPasswordHasher
from .ports import (
    AccountRepository,
    EmailSender,
    LoginResult,
    LoginStatus,
    PasswordHasher,
    RegisterResult,
    ResendResult,
    TokenIssuer,
    VerifyResult,
)

__all__ = [
    "Account",
    "AccountError",
    "AccountRepository",
    "AccountService",
    "AccountUpdate",
    "BcryptPasswordHasher",
    "EmailAlreadyRegistered",
    "EmailSender",
    "LoginResult",
    "LoginStatus",
    "MAX_PASSWORD_BYTES",
    "NewAccount",
    "NotificationError",
    "PasswordHasher",
    "RegisterResult",
    "ResendResult",
    "TokenIssuer",
    "VerifyResult",
    "generate_verification_code",
    "normalize_email",
]
