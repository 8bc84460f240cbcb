# app/database.py
"""
Database engine construction, session management, and table creation.
Uses SQLAlchemy with PostgreSQL. The engine is built once at startup by main.py,
kept on app.state and disposed at shutdown; nothing here holds a global pool.
"""

from contextlib import contextmanager

from fastapi import Request
from sqlalchemy import Engine, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from app.config import Settings
from app.services.exceptions import TransactionFailure
from app.utils.logger import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    connect_args = {}
    if settings.DATABASE_SSL and settings.DATABASE_URL.startswith("postgresql"):
        connect_args["sslmode"] = "require"
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,          # Auto-reconnect if DB connection drops
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        connect_args=connect_args,
        echo=False,                  # Set True to log all SQL queries (debug only)
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db(request: Request):
    """FastAPI dependency. Yields a DB session and closes it after request."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session, failure_message: str):
    """
    Run a block of statements as one transaction.
    Commits on success; rolls back on any exception. Store errors are logged
    and re-raised as TransactionFailure carrying only failure_message.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{failure_message}: {e}", exc_info=True)
        raise TransactionFailure(failure_message) from e
    except Exception:
        db.rollback()
        raise


def create_tables(engine: Engine):
    """
    Creates all DB tables. Safe to call multiple times.
    Import all models here so SQLAlchemy knows about them.
    """
    from app.models.user import User      # noqa
    from app.models.vehicle import Vehicle  # noqa
    from app.models.job import Job        # noqa
    from app.models.part import Part      # noqa

    Base.metadata.create_all(bind=engine)
