"""
JWT token issuer adapter - Implements TokenIssuer protocol.

Tokens are HS256-signed with the process-wide secret key and carry the
account id as the subject claim plus issued-at and expiry claims.
Verification returns None on any failure; the API layer turns that
into a 401.
"""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt


class JwtTokenIssuer:
    """
    Implements TokenIssuer protocol via python-jose.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire = timedelta(minutes=expire_minutes)

    def issue(self, account_id: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": account_id,
            "iat": now,
            "exp": now + self._expire,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str) -> str | None:
        """Decode and check a token. Returns the account id or None."""
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self._algorithm])
        except JWTError:
            return None
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            return None
        return subject
