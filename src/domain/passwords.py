"""
bcrypt password hasher - Implements PasswordHasher protocol.

bcrypt embeds a random salt in every hash and checkpw compares in
constant time. The cost factor makes each call deliberately slow.

bcrypt only reads the first 72 bytes of its input, and bcrypt >= 5
raises instead of truncating. Passwords are truncated to that limit
here, on both hash and verify, so any password the caller accepts
can be stored.
"""

import secrets

import bcrypt

MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


class BcryptPasswordHasher:
    """
    Implements PasswordHasher protocol via bcrypt.

    A dummy hash is computed once at construction with the same cost, so
    verify_dummy() takes as long as a real verification. Login runs it
    when the email is unknown.
    """

    def __init__(self, rounds: int = 10) -> None:
        self._rounds = rounds
        self._dummy_hash = self.hash(secrets.token_urlsafe(16))

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self._rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except ValueError:
            # Malformed stored hash
            return False

    def verify_dummy(self, password: str) -> None:
        self.verify(password, self._dummy_hash)
