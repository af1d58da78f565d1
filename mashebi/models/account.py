"""ORM model for login accounts."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, func, true

from mashebi.models.base import Base


class Account(Base):
    """
    Account that can sign in with username and password.

    The login flow only reads this table. username is unique case-insensitively;
    password_hash is an argon2id PHC string or a legacy bcrypt hash.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_name = Column(String(255), nullable=False)
    username = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, default="")
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


Index("ux_accounts_username_lower", func.lower(Account.username), unique=True)
