"""
In-memory repository adapter - Implements AccountRepository protocol.

Process-local storage for development (STORAGE_BACKEND=memory) and tests.
Email uniqueness is enforced on create under a lock, the same guarantee
the PostgreSQL UNIQUE constraint gives.
"""

import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone

from src.domain.exceptions import EmailAlreadyRegistered
from src.domain.models import Account, AccountUpdate, NewAccount


class InMemoryAccountRepository:
    """Implements AccountRepository protocol with dictionaries."""

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}  # id -> account
        self._email_index: dict[str, str] = {}  # email -> id
        self._lock = threading.Lock()

    def find_by_email(self, email: str) -> Account | None:
        with self._lock:
            account_id = self._email_index.get(email)
            return self._accounts.get(account_id) if account_id else None

    def find_by_email_and_code(self, email: str, code: str) -> Account | None:
        account = self.find_by_email(email)
        if account is None or account.verification_code is None:
            return None
        return account if account.verification_code == code else None

    def find_by_id(self, account_id: str) -> Account | None:
        with self._lock:
            return self._accounts.get(account_id)

    def create(self, account: NewAccount) -> Account:
        with self._lock:
            if account.email in self._email_index:
                raise EmailAlreadyRegistered(account.email)
            stored = Account(
                id=str(uuid.uuid4()),
                full_name=account.full_name,
                email=account.email,
                password_hash=account.password_hash,
                is_email_verified=False,
                verification_code=account.verification_code,
                verification_code_expires_at=account.verification_code_expires_at,
                created_at=datetime.now(timezone.utc),
            )
            self._accounts[stored.id] = stored
            self._email_index[stored.email] = stored.id
            return stored

    def update_by_id(self, account_id: str, update: AccountUpdate) -> Account:
        with self._lock:
            if account_id not in self._accounts:
                raise LookupError(f"Account not found: {account_id}")
            stored = replace(
                self._accounts[account_id],
                is_email_verified=update.is_email_verified,
                verification_code=update.verification_code,
                verification_code_expires_at=update.verification_code_expires_at,
            )
            self._accounts[account_id] = stored
            return stored

    def reissue_code(self, account_id: str, code: str, expires_at: datetime) -> Account | None:
        with self._lock:
            current = self._accounts.get(account_id)
            if current is None or current.is_email_verified:
                return None
            stored = replace(current, verification_code=code, verification_code_expires_at=expires_at)
            self._accounts[account_id] = stored
            return stored

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
