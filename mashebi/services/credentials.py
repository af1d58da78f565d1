"""Credential store access: one lookup that returns a verified active account or nothing."""

from collections.abc import Callable, Mapping
from typing import Any, Literal

from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.orm import Session

from mashebi.core.security import (
    UnsupportedPasswordHashError,
    burn_password_check,
    verify_password,
)
from mashebi.models import Account
from mashebi.schemas.auth import AccountRecord

REASON_PRIMITIVE_MISSING = "verification_primitive_missing"
REASON_STORE_UNAVAILABLE = "store_unavailable"

# Postgres SQLSTATE for "function does not exist" (e.g. pgcrypto not installed).
PG_UNDEFINED_FUNCTION = "42883"

Verifier = Literal["application", "pgcrypto"]
RowMapper = Callable[[Mapping[str, Any]], AccountRecord]


class CredentialStoreError(Exception):
    """Raised when the store cannot answer (unreachable, or no verification primitive)."""

    def __init__(self, message: str, reason: str, cause: Exception | None = None) -> None:
        self.message = message
        self.reason = reason
        self.cause = cause
        super().__init__(message)


def account_record_from_row(row: Mapping[str, Any]) -> AccountRecord:
    """Map a snake_case accounts row to an AccountRecord."""
    return AccountRecord(
        id=row["id"],
        username=row["username"],
        account_name=row["account_name"],
        email=row["email"],
    )


def _is_undefined_function(exc: DBAPIError) -> bool:
    return getattr(exc.orig, "pgcode", None) == PG_UNDEFINED_FUNCTION


class CredentialStore:
    """
    Verifies username/password pairs against the accounts table.

    verifier="application" loads the stored hash for the active account and
    checks it with argon2/bcrypt inside this class; the hash never leaves it.
    verifier="pgcrypto" has Postgres compare crypt(:password, password_hash)
    in the query itself.
    """

    def __init__(
        self,
        session: Session,
        *,
        verifier: Verifier = "application",
        row_mapper: RowMapper = account_record_from_row,
    ) -> None:
        self._session = session
        self._verifier = verifier
        self._row_mapper = row_mapper

    def verify(self, username: str, password: str) -> AccountRecord | None:
        """Return the matching active account if the password verifies, else None."""
        try:
            if self._verifier == "pgcrypto":
                return self._verify_in_database(username, password)
            return self._verify_in_application(username, password)
        except UnsupportedPasswordHashError as e:
            raise CredentialStoreError(
                f"Stored password hash cannot be verified: {e.message}",
                REASON_PRIMITIVE_MISSING,
                e,
            ) from e
        except DBAPIError as e:
            self._session.rollback()
            if _is_undefined_function(e):
                raise CredentialStoreError(
                    "Password verification function crypt() is not available; "
                    "is the pgcrypto extension installed?",
                    REASON_PRIMITIVE_MISSING,
                    e,
                ) from e
            raise CredentialStoreError(
                f"Credential lookup failed: {type(e).__name__}",
                REASON_STORE_UNAVAILABLE,
                e,
            ) from e
        except SQLAlchemyError as e:
            self._session.rollback()
            raise CredentialStoreError(
                f"Credential lookup failed: {type(e).__name__}",
                REASON_STORE_UNAVAILABLE,
                e,
            ) from e

    def _active_account_query(self, username: str, *columns: Any):
        return (
            select(
                Account.id,
                Account.username,
                Account.account_name,
                Account.email,
                *columns,
            )
            .where(
                func.lower(Account.username) == func.lower(username),
                Account.is_active.is_(True),
            )
            .order_by(Account.id)
            .limit(1)
        )

    def _verify_in_application(self, username: str, password: str) -> AccountRecord | None:
        stmt = self._active_account_query(username, Account.password_hash)
        row = self._session.execute(stmt).mappings().first()
        if row is None:
            burn_password_check(password)
            return None
        if not verify_password(password, row["password_hash"]):
            return None
        return self._row_mapper(row)

    def _verify_in_database(self, username: str, password: str) -> AccountRecord | None:
        stmt = self._active_account_query(username).where(
            Account.password_hash == func.crypt(password, Account.password_hash)
        )
        row = self._session.execute(stmt).mappings().first()
        if row is None:
            return None
        return self._row_mapper(row)
