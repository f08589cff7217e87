# pyright: reportMissingTypeStubs=false
"""
Database configuration and session management.

This module builds SQLAlchemy engines and session factories on request.
Nothing here is created at import time: the caller constructs the engine,
owns it for the lifetime of its process or test, and disposes of it.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from core.config import DATABASE_URL

logger = logging.getLogger(__name__)

DB_POOL_RECYCLE_SECONDS = 300  # 5 minutes


# Create Base class for declarative models
class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


# SQLAlchemy event listeners to automatically set created_at and updated_at in UTC
@event.listens_for(Base, "before_insert", propagate=True)  # type: ignore
def receive_before_insert(mapper, connection, target):  # type: ignore
    """Set created_at and updated_at on insert."""
    now = datetime.now(timezone.utc)
    for column_name in ("created_at", "updated_at"):
        if column_name in mapper.columns and getattr(target, column_name, None) is None:  # type: ignore
            setattr(target, column_name, now)  # type: ignore


@event.listens_for(Base, "before_update", propagate=True)  # type: ignore
def receive_before_update(mapper, connection, target):  # type: ignore
    """Set updated_at on update."""
    if "updated_at" in mapper.columns:  # type: ignore
        setattr(target, "updated_at", datetime.now(timezone.utc))  # type: ignore


def create_db_engine(database_url: Optional[str] = None, echo: bool = False) -> Engine:
    """
    Create a SQLAlchemy engine.

    Args:
        database_url: Connection URL; defaults to DATABASE_URL from the environment
        echo: Whether to log emitted SQL

    Returns:
        Engine owned by the caller (call ``engine.dispose()`` when done)
    """
    url = database_url or DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, future=True)
    return create_engine(
        url,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=DB_POOL_RECYCLE_SECONDS,
        echo=echo,
        future=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Create a configured session factory bound to ``engine``."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,  # Don't expire objects after commit
    )


@contextmanager
def session_scope(factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """
    Context manager for a database session from ``factory``.

    Commits on success, rolls back on any exception and always closes.

    Example:
        ```python
        with session_scope(factory) as db:
            store = SqlAlchemyStudyBlockStore(db)
        ```
    """
    db = factory()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception(f"Database transaction failed: {e}")
        raise
    finally:
        db.close()


def create_tables(engine: Engine) -> None:
    """
    Create all database tables defined in SQLAlchemy models.

    Safe to call multiple times - will not recreate existing tables.
    """
    # Import models so their tables are registered on Base.metadata
    import models  # noqa: F401  # type: ignore[reportUnusedImport]

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def drop_tables(engine: Engine) -> None:
    """
    Drop all database tables defined in SQLAlchemy models.

    WARNING: This will permanently delete all data in the tables!
    """
    Base.metadata.drop_all(bind=engine)
    logger.info("Database tables dropped successfully")
