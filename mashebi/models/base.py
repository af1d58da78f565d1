"""SQLAlchemy declarative Base shared by the accounts and todos models."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models; Alembic autogenerates from its metadata."""
