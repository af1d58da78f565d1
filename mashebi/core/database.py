"""PostgreSQL connection pool and session management."""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from mashebi.core.config import Settings, settings


def engine_options(cfg: Settings) -> dict[str, Any]:
    """Pool and libpq options for the engine: bounded pool, TLS, timeouts, keepalives."""
    return {
        "pool_pre_ping": True,
        "pool_size": cfg.DB_POOL_SIZE,
        "max_overflow": cfg.DB_MAX_OVERFLOW,
        "echo": cfg.DEBUG,
        "connect_args": {
            "sslmode": cfg.DB_SSLMODE,
            "channel_binding": cfg.DB_CHANNEL_BINDING,
            "connect_timeout": cfg.DB_CONNECT_TIMEOUT_SEC,
            # statement_timeout is in milliseconds
            "options": f"-c statement_timeout={cfg.DB_STATEMENT_TIMEOUT_SEC * 1000}",
            "keepalives": 1,
            "keepalives_idle": 30,
        },
    }


engine = create_engine(settings.DATABASE_URL, **engine_options(settings))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session and closes it when done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connected(db: Session) -> bool:
    """Run a trivial query to verify the database is reachable."""
    try:
        db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
