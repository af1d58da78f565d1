"""Login endpoint and the bearer-token dependency (get_current_account)."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from mashebi.core.config import get_settings
from mashebi.core.database import get_db
from mashebi.core.security import decode_access_token
from mashebi.schemas.auth import (
    CurrentAccount,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)
from mashebi.services.auth import AuthenticationError, LoginValidationError, login
from mashebi.services.credentials import CredentialStore, CredentialStoreError

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

INTERNAL_ERROR_MESSAGE = "An internal error occurred."


def get_credential_store(db: Annotated[Session, Depends(get_db)]) -> CredentialStore:
    """Dependency: credential store bound to the request's session."""
    return CredentialStore(db, verifier=get_settings().PASSWORD_VERIFIER)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"model": MessageResponse, "description": "Missing username or password"},
        401: {"description": "Invalid credentials"},
        500: {"model": MessageResponse, "description": "Internal error"},
    },
)
def post_login(
    body: LoginRequest,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
):
    """
    Authenticate with username and password; returns a signed bearer token and the account.
    Include the token in the Authorization header as: Bearer <token>
    """
    try:
        return login(store, body.username, body.password, get_settings())
    except LoginValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": e.message},
        )
    except AuthenticationError:
        return Response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    except CredentialStoreError as e:
        logger.error(
            "Login failed: credential store error",
            extra={
                "reason": e.reason,
                "detail": e.message[:500],
                "cause": repr(e.cause)[:500] if e.cause else None,
            },
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )
    except Exception:
        logger.exception("Login failed: unexpected error")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": INTERNAL_ERROR_MESSAGE},
        )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_account(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentAccount:
    """Dependency: require a valid Bearer token and return the account it names. No DB lookup."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials, get_settings())
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        account_id = int(payload["sub"])
        return CurrentAccount(
            account_id=account_id,
            username=payload["unique_name"],
            account_name=payload["account_name"],
        )
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token payload")


@router.get("/me", response_model=CurrentAccount)
def get_me(
    current: Annotated[CurrentAccount, Depends(get_current_account)],
) -> CurrentAccount:
    """Return the account identified by the bearer token."""
    return current
