"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Integrity Design:
-----------------
1. **UNIQUE(email)**: The authoritative guard for email uniqueness. A
   concurrent duplicate INSERT that slips past the service's pre-check
   fails here with UniqueViolation, mapped to EmailAlreadyRegistered.

2. **CHECK constraint on code fields**: verification_code and
   verification_code_expires_at are NULL together or set together.

3. **Single-statement updates**: update_by_id writes the verified flag and
   both code fields in one UPDATE ... RETURNING, so the transition is
   atomic per account. reissue_code carries `is_email_verified = FALSE`
   in its WHERE clause, so a reissue never lands on a verified account.

4. **Primary-key lookups**: ids are compared as `id = %s::uuid` so the
   index is used. Text that is not a UUID matches no account.
"""

import logging
from datetime import datetime
from pathlib import Path

from psycopg.errors import InvalidTextRepresentation, UniqueViolation
from psycopg_pool import ConnectionPool

from src.domain.exceptions import EmailAlreadyRegistered
from src.domain.models import Account, AccountUpdate, NewAccount

logger = logging.getLogger(__name__)

_COLUMNS = """
    id::text, full_name, email, password_hash, is_email_verified,
    verification_code, verification_code_expires_at, created_at
"""


def _row_to_account(row: tuple) -> Account:
    return Account(
        id=row[0],
        full_name=row[1],
        email=row[2],
        password_hash=row[3],
        is_email_verified=row[4],
        verification_code=row[5],
        verification_code_expires_at=row[6],
        created_at=row[7],
    )


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE email = %s"
        return self._fetch_one(sql, (email,))

    def find_by_email_and_code(self, email: str, code: str) -> Account | None:
        # NULL never equals a parameter, so verified accounts never match
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE email = %s AND verification_code = %s"
        return self._fetch_one(sql, (email, code))

    def find_by_id(self, account_id: str) -> Account | None:
        sql = f"SELECT {_COLUMNS} FROM accounts WHERE id = %s::uuid"
        try:
            return self._fetch_one(sql, (account_id,))
        except InvalidTextRepresentation:
            # Not a UUID, so no account can have it
            return None

    def create(self, account: NewAccount) -> Account:
        """
        Insert a new unverified account.

        Raises:
            EmailAlreadyRegistered: If the UNIQUE(email) constraint rejects the row
        """
        sql = f"""
            INSERT INTO accounts (
                full_name, email, password_hash, is_email_verified,
                verification_code, verification_code_expires_at, created_at
            )
            VALUES (%s, %s, %s, FALSE, %s, %s, NOW())
            RETURNING {_COLUMNS}
        """
        params = (
            account.full_name,
            account.email,
            account.password_hash,
            account.verification_code,
            account.verification_code_expires_at,
        )

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        except UniqueViolation:
            raise EmailAlreadyRegistered(account.email) from None
        return _row_to_account(row)

    def update_by_id(self, account_id: str, update: AccountUpdate) -> Account:
        sql = f"""
            UPDATE accounts
            SET is_email_verified = %s,
                verification_code = %s,
                verification_code_expires_at = %s
            WHERE id = %s::uuid
            RETURNING {_COLUMNS}
        """
        params = (
            update.is_email_verified,
            update.verification_code,
            update.verification_code_expires_at,
            account_id,
        )

        row = self._write_one(sql, params)
        if row is None:
            raise LookupError(f"Account not found: {account_id}")
        return _row_to_account(row)

    def reissue_code(self, account_id: str, code: str, expires_at: datetime) -> Account | None:
        """
        Replace the code and expiry unless the account is verified.

        The verified check lives in the WHERE clause, so a verification
        committed after the caller's read makes this a no-op.
        """
        sql = f"""
            UPDATE accounts
            SET verification_code = %s,
                verification_code_expires_at = %s
            WHERE id = %s::uuid AND is_email_verified = FALSE
            RETURNING {_COLUMNS}
        """
        row = self._write_one(sql, (code, expires_at, account_id))
        return _row_to_account(row) if row is not None else None

    def _fetch_one(self, sql: str, params: tuple) -> Account | None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
        return _row_to_account(row) if row is not None else None

    def _write_one(self, sql: str, params: tuple) -> tuple | None:
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, params)
                row = cursor.fetchone()
                conn.commit()
        except InvalidTextRepresentation:
            return None
        return row


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
