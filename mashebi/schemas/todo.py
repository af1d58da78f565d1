"""Request/response schemas for todo endpoints."""

from datetime import datetime

from pydantic import Field

from mashebi.schemas.base import CamelModel


class TodoCreate(CamelModel):
    """Body for creating a todo; title is trimmed, missing means empty."""

    title: str | None = None


class TodoUpdate(CamelModel):
    """Partial update; only supplied fields change."""

    title: str | None = None
    is_done: bool | None = None


class TodoRead(CamelModel):
    """A todo as returned by the API."""

    id: int
    title: str
    is_done: bool = Field(default=False)
    created_at: datetime
