"""Pydantic request/response schemas."""

from mashebi.schemas.auth import (
    AccountRecord,
    CurrentAccount,
    LoginRequest,
    LoginResponse,
    MessageResponse,
)
from mashebi.schemas.health import LivenessResponse, ReadinessResponse
from mashebi.schemas.todo import TodoCreate, TodoRead, TodoUpdate

__all__ = [
    "AccountRecord",
    "CurrentAccount",
    "LivenessResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "ReadinessResponse",
    "TodoCreate",
    "TodoRead",
    "TodoUpdate",
]
