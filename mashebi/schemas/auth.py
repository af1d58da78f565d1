"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from mashebi.schemas.base import CamelModel


class LoginRequest(BaseModel):
    """Credentials for login. Both optional here; emptiness is checked by the login service."""

    username: str | None = Field(default=None, description="Username (case-insensitive)")
    password: str | None = Field(default=None, description="Password")


class AccountRecord(BaseModel):
    """Identity fields of an account matched at login. Never carries the password hash."""

    id: int
    username: str
    account_name: str
    email: str


class LoginResponse(CamelModel):
    """Token and account identity returned after successful login."""

    token: str = Field(..., description="Signed bearer token")
    account_id: int
    username: str = Field(..., description="Username as stored")
    account_name: str
    email: str


class MessageResponse(BaseModel):
    """Error body carrying a single human-readable message."""

    message: str


class CurrentAccount(CamelModel):
    """Authenticated account (from token claims) for dependency injection."""

    account_id: int
    username: str
    account_name: str
