"""SQLAlchemy ORM models."""

from mashebi.models.account import Account
from mashebi.models.base import Base
from mashebi.models.todo import Todo

__all__ = ["Account", "Base", "Todo"]
