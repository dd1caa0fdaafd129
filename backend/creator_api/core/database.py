"""
Database configuration and session management
"""

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from typing import Generator
import logging

from creator_api.core.config import settings
from creator_api.models import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str, debug: bool = False) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL

    SQLite (used by the test suite) gets a single shared connection,
    everything else a pre-pinged connection pool.
    """
    if database_url.startswith("sqlite"):
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=debug,
        )

        @event.listens_for(sqlite_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Enforce foreign keys on SQLite connections"""
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=10,
        max_overflow=20,
        echo=debug,  # Log SQL queries in debug mode
    )


engine = build_engine(settings.database_url, debug=settings.DEBUG)

# Create SessionLocal class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    expire_on_commit=False  # Keep objects accessible after commit
)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency to get database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for sessions outside a request (startup checks, scripts)
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        logger.error(f"Database error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


def create_all_tables() -> None:
    """
    Create the users and creations tables if missing
    Note: In production, manage the schema with migrations instead
    """
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")


def drop_all_tables() -> None:
    """
    Drop all tables
    WARNING: This will delete all data!
    """
    Base.metadata.drop_all(bind=engine)
    logger.info("Database tables dropped")


def check_database_connection() -> bool:
    try:
        with get_db_session() as db:
            db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False
