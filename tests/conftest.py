"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- A fast bcrypt hasher (cost 4) and a JWT token issuer
- In-memory account storage and a recording email sender
- A controllable clock for expiry tests
- An AccountService wired from the above

DEBUG must be set before any src.api import so get_settings() generates
a signing key instead of refusing to start.
"""

import os

os.environ.setdefault("DEBUG", "true")

from datetime import datetime, timedelta, timezone

import pytest

from src.adapters.repository.memory import InMemoryAccountRepository
from src.adapters.tokens.jwt_issuer import JwtTokenIssuer
from src.domain.accounts import AccountService
from src.domain.exceptions import NotificationError
from src.domain.passwords import BcryptPasswordHasher

TEST_SECRET_KEY = "test-secret-key-0123456789abcdef0123456789"


class RecordingEmailSender:
    """EmailSender that records deliveries and can be told to fail."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def send_verification_code(self, email: str, code: str) -> None:
        if self.fail:
            raise NotificationError("delivery disabled in test")
        self.sent.append((email, code))

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture(scope="session")
def password_hasher() -> BcryptPasswordHasher:
    """bcrypt at minimum cost so tests stay fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def token_issuer() -> JwtTokenIssuer:
    return JwtTokenIssuer(secret_key=TEST_SECRET_KEY, expire_minutes=60)


@pytest.fixture
def repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def service(
    repository: InMemoryAccountRepository,
    password_hasher: BcryptPasswordHasher,
    token_issuer: JwtTokenIssuer,
    email_sender: RecordingEmailSender,
    clock: FrozenClock,
) -> AccountService:
    return AccountService(
        repository=repository,
        password_hasher=password_hasher,
        token_issuer=token_issuer,
        email_sender=email_sender,
        clock=clock,
    )
