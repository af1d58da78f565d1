"""Login: validate credentials, verify them against the store, mint a token."""

import logging
from typing import TYPE_CHECKING, Protocol

from mashebi.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN, create_access_token
from mashebi.schemas.auth import AccountRecord, LoginResponse

if TYPE_CHECKING:
    from mashebi.core.config import Settings

logger = logging.getLogger(__name__)


class CredentialVerifier(Protocol):
    def verify(self, username: str, password: str) -> AccountRecord | None: ...


class LoginValidationError(Exception):
    """Raised when the login request is missing a username or password."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationError(Exception):
    """Raised when no active account matches the credentials. Deliberately carries no reason."""


def normalize_credentials(username: str | None, password: str | None) -> tuple[str, str]:
    """
    Return (trimmed username, raw password) or raise LoginValidationError.

    The password is only trimmed to decide emptiness; the raw value is what gets verified.
    """
    user = (username or "").strip()
    if not user or not (password or "").strip():
        raise LoginValidationError("Username and password are required.")
    if len(user) > USERNAME_MAX_LEN:
        raise LoginValidationError(f"Username must be at most {USERNAME_MAX_LEN} characters.")
    if len(password) > PASSWORD_MAX_LEN:
        raise LoginValidationError(f"Password must be at most {PASSWORD_MAX_LEN} characters.")
    if "\x00" in user or "\x00" in password:
        raise LoginValidationError("Username and password must not contain NUL characters.")
    return user, password


def login(
    store: CredentialVerifier,
    username: str | None,
    password: str | None,
    settings: "Settings",
) -> LoginResponse:
    """
    Authenticate and issue a token for the matching account.

    Raises LoginValidationError (bad input, store not touched), AuthenticationError
    (unknown user, wrong password or inactive account, indistinguishably), and lets
    CredentialStoreError from the store propagate.
    """
    user, raw_password = normalize_credentials(username, password)

    account = store.verify(user, raw_password)
    if account is None:
        raise AuthenticationError()

    token = create_access_token(account, settings)
    logger.info("Login succeeded", extra={"account_id": account.id})
    return LoginResponse(
        token=token,
        account_id=account.id,
        username=account.username,
        account_name=account.account_name,
        email=account.email,
    )
