"""Password hashing and JWT creation/verification for authentication."""

import secrets
from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import TYPE_CHECKING, Any

import bcrypt
import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from mashebi.core.config import get_settings

if TYPE_CHECKING:
    from mashebi.core.config import Settings
    from mashebi.schemas.auth import AccountRecord

# Input bounds for login and account creation.
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 1024

ARGON2_PREFIX = "$argon2"
# pgcrypto gen_salt('bf') produces $2a$; the bcrypt library writes $2b$.
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class UnsupportedPasswordHashError(Exception):
    """Raised when a stored hash uses a scheme no installed verifier understands."""

    def __init__(self, scheme: str, cause: Exception | None = None) -> None:
        self.scheme = scheme
        self.cause = cause
        self.message = f"No password verifier available for hash scheme {scheme!r}"
        super().__init__(self.message)


@lru_cache
def _password_hasher() -> PasswordHasher:
    cfg = get_settings()
    return PasswordHasher(
        time_cost=cfg.ARGON2_TIME_COST,
        memory_cost=cfg.ARGON2_MEMORY_COST_KIB,
        parallelism=cfg.ARGON2_PARALLELISM,
    )


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage (argon2id). Do not store plain passwords."""
    return _password_hasher().hash(plain_password)


def _hash_scheme(hashed: str) -> str:
    """Scheme tag of a modular-crypt/PHC string, e.g. '$argon2id' or '$2b'."""
    if not hashed.startswith("$"):
        return "unknown"
    return "$" + hashed[1:].split("$", 1)[0]


def verify_password(plain_password: str, hashed: str) -> bool:
    """
    Verify a plain password against a stored hash in constant time.

    Returns False on mismatch. Raises UnsupportedPasswordHashError when the
    stored value is not an argon2 or bcrypt hash (or is malformed), since that
    is a data/deployment fault rather than a wrong password.
    """
    if hashed.startswith(ARGON2_PREFIX):
        try:
            return _password_hasher().verify(hashed, plain_password)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as e:
            raise UnsupportedPasswordHashError(_hash_scheme(hashed), e) from e
    if hashed.startswith(BCRYPT_PREFIXES):
        # bcrypt only looks at the first 72 bytes; newer releases reject longer input.
        pw_bytes = plain_password.encode("utf-8")[:72]
        try:
            return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
        except ValueError as e:
            raise UnsupportedPasswordHashError(_hash_scheme(hashed), e) from e
    raise UnsupportedPasswordHashError(_hash_scheme(hashed))


@lru_cache
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(32))


def burn_password_check(plain_password: str) -> None:
    """
    Spend the same hashing work as a real check, for accounts that do not exist.

    The dummy hash is argon2id with the configured costs, matching accounts
    created by hash_password. Accounts still on legacy bcrypt hashes verify at
    bcrypt speed, so response time can separate them from unknown users until
    their hashes are migrated to argon2id.
    """
    verify_password(plain_password, _dummy_hash())


def mint_token(
    claims: dict[str, Any],
    *,
    issuer: str,
    audience: str,
    signing_key: str,
    expires_in: timedelta,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    """
    Sign claims into a JWT valid from now until now + expires_in.

    iat/nbf/exp are NumericDates with sub-second precision, so two tokens for
    the same claims minted at different instants never collide.
    """
    issued_at = now or datetime.now(UTC)
    payload: dict[str, Any] = {
        **claims,
        "iss": issuer,
        "aud": audience,
        "iat": issued_at.timestamp(),
        "nbf": issued_at.timestamp(),
        "exp": (issued_at + expires_in).timestamp(),
    }
    return jwt.encode(payload, signing_key, algorithm=algorithm)


def create_access_token(
    account: "AccountRecord",
    settings: "Settings",
    now: datetime | None = None,
) -> str:
    """Create an access token carrying the account's identity claims."""
    claims = {
        "sub": str(account.id),
        "unique_name": account.username,
        "account_id": str(account.id),
        "account_name": account.account_name,
    }
    return mint_token(
        claims,
        issuer=settings.JWT_ISSUER,
        audience=settings.JWT_AUDIENCE,
        signing_key=settings.JWT_SECRET.get_secret_value(),
        expires_in=timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
        algorithm=settings.JWT_ALGORITHM,
        now=now,
    )


def decode_access_token(token: str, settings: "Settings") -> dict[str, Any]:
    """
    Decode and validate JWT; return the claims.

    Checks signature, issuer, audience, exp/nbf/iat with JWT_LEEWAY_SECONDS of
    clock skew. Raises jwt.PyJWTError on invalid or expired token.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
        leeway=settings.JWT_LEEWAY_SECONDS,
        options={"require": ["exp", "iat", "iss", "aud", "sub"]},
    )
