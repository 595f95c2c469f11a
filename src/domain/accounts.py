"""
Account domain service - Credential lifecycle implementation.

This module contains the core business logic for the account lifecycle:
registration, email verification, verification code reissue and login.

Account Lifecycle
=================

    register        -> unverified, code + expiry issued
    resend code     -> unverified, fresh code + expiry (unverified only)
    verify email    -> verified, code + expiry cleared (terminal)

Every flow returns a result enum. Unexpected faults (store errors, hashing
errors) are logged here and collapsed to INTERNAL_ERROR so no internal
detail reaches the caller.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from .codes import generate_verification_code
from .exceptions import EmailAlreadyRegistered, NotificationError
from .models import Account, AccountUpdate, NewAccount, normalize_email
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

logger = logging.getLogger(__name__)

DEFAULT_CODE_TTL = timedelta(minutes=10)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class AccountService:
    """
    Domain service for the account credential lifecycle.

    Collaborators are injected explicitly; the service holds no state
    of its own between calls.
    """

    repository: AccountRepository
    password_hasher: PasswordHasher
    token_issuer: TokenIssuer
    email_sender: EmailSender
    code_ttl: timedelta = DEFAULT_CODE_TTL
    require_verified_email: bool = False
    clock: Callable[[], datetime] = utc_now
    code_generator: Callable[[], str] = generate_verification_code

    def register(self, full_name: str, email: str, password: str) -> RegisterResult:
        """
        Register a new unverified account and send its verification code.

        The lookup before insert only produces an early failure; the
        store's uniqueness constraint is the real guard, and losing that
        race is reported as ALREADY_EXISTS too.

        If delivery fails the account is kept in its unverified,
        code-issued state and can be recovered with resend_verification_code.

        Args:
            full_name: Display name
            email: User's email address (will be normalized)
            password: User's password (will be hashed)

        Returns:
            RegisterResult indicating success or failure kind
        """
        normalized_email = normalize_email(email)

        try:
            if self.repository.find_by_email(normalized_email) is not None:
                return RegisterResult.ALREADY_EXISTS

            password_hash = self.password_hasher.hash(password)
            code, expires_at = self._issue_code()
            account = self.repository.create(
                NewAccount(
                    full_name=full_name,
                    email=normalized_email,
                    password_hash=password_hash,
                    verification_code=code,
                    verification_code_expires_at=expires_at,
                )
            )
        except EmailAlreadyRegistered:
            return RegisterResult.ALREADY_EXISTS
        except Exception:
            logger.exception("Unexpected error during registration")
            return RegisterResult.INTERNAL_ERROR

        if not self._deliver_code(account.email, code):
            return RegisterResult.DELIVERY_FAILED

        logger.info("Registered account %s", account.id)
        return RegisterResult.SUCCESS

    def verify_email(self, email: str, code: str) -> VerifyResult:
        """
        Verify an email address with its current verification code.

        Checks run in order: account exists, not yet verified, code
        matches, code not expired. Only a full pass mutates the account.
        """
        normalized_email = normalize_email(email)

        try:
            if (account := self.repository.find_by_email(normalized_email)) is None:
                return VerifyResult.NOT_FOUND
            if account.is_email_verified:
                return VerifyResult.ALREADY_VERIFIED

            account = self.repository.find_by_email_and_code(normalized_email, code)
            if account is None:
                return VerifyResult.INVALID_CODE

            expires_at = account.verification_code_expires_at
            if expires_at is not None and expires_at < self.clock():
                return VerifyResult.EXPIRED

            self.repository.update_by_id(
                account.id,
                AccountUpdate(
                    is_email_verified=True,
                    verification_code=None,
                    verification_code_expires_at=None,
                ),
            )
        except Exception:
            logger.exception("Unexpected error during email verification")
            return VerifyResult.INTERNAL_ERROR

        logger.info("Verified email for account %s", account.id)
        return VerifyResult.SUCCESS

    def resend_verification_code(self, email: str) -> ResendResult:
        """Issue a fresh code and expiry for an unverified account and send it."""
        normalized_email = normalize_email(email)

        try:
            if (account := self.repository.find_by_email(normalized_email)) is None:
                return ResendResult.NOT_FOUND
            if account.is_email_verified:
                return ResendResult.ALREADY_VERIFIED

            code, expires_at = self._issue_code()
            account = self.repository.reissue_code(account.id, code, expires_at)
            if account is None:
                # Verified between the lookup and the write
                return ResendResult.ALREADY_VERIFIED
        except Exception:
            logger.exception("Unexpected error while reissuing verification code")
            return ResendResult.INTERNAL_ERROR

        if not self._deliver_code(account.email, code):
            return ResendResult.DELIVERY_FAILED
        return ResendResult.SUCCESS

    def login(self, email: str, password: str) -> LoginResult:
        """
        Authenticate with email and password and issue a bearer token.

        Unknown emails and wrong passwords produce the same
        INVALID_CREDENTIALS result. bcrypt runs on both paths (against a
        dummy hash when the email is unknown) so response time does not
        reveal whether the account exists.

        EMAIL_NOT_VERIFIED is only possible when require_verified_email
        is enabled, and only after the password has matched.
        """
        normalized_email = normalize_email(email)

        try:
            account = self.repository.find_by_email(normalized_email)
            if account is None:
                self.password_hasher.verify_dummy(password)
                return LoginResult(LoginStatus.INVALID_CREDENTIALS)

            if not self.password_hasher.verify(password, account.password_hash):
                return LoginResult(LoginStatus.INVALID_CREDENTIALS)

            if self.require_verified_email and not account.is_email_verified:
                return LoginResult(LoginStatus.EMAIL_NOT_VERIFIED)

            token = self.token_issuer.issue(account.id)
        except Exception:
            logger.exception("Unexpected error during login")
            return LoginResult(LoginStatus.INTERNAL_ERROR)

        return LoginResult(LoginStatus.SUCCESS, access_token=token)

    def get_account(self, account_id: str) -> Account | None:
        """Return the account for an authenticated identifier."""
        return self.repository.find_by_id(account_id)

    def _issue_code(self) -> tuple[str, datetime]:
        return self.code_generator(), self.clock() + self.code_ttl

    def _deliver_code(self, email: str, code: str) -> bool:
        try:
            self.email_sender.send_verification_code(email, code)
        except NotificationError:
            logger.error("Verification code delivery failed for %s", email)
            return False
        except Exception:
            logger.exception("Unexpected error delivering verification code to %s", email)
            return False
        return True
