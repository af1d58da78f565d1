"""ORM model for todo items."""

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, String

from mashebi.models.base import Base

TITLE_MAX_LEN = 200


class Todo(Base):
    """A single todo item."""

    __tablename__ = "todos"

    # SQLite only autoincrements INTEGER primary keys.
    id = Column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    title = Column(String(TITLE_MAX_LEN), nullable=False)
    is_done = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
