"""Database connection and session management.

The connection URL comes from ``DATABASE_URL`` (see ``AppSettings``).
PostgreSQL is the deployment target; SQLite is accepted for local
development and tests.
"""
import logging
from contextlib import contextmanager
from typing import Generator

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from proposal_maker.config.settings import get_settings

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def _create_engine():
    """Create SQLAlchemy engine based on database configuration.

    Returns:
        Engine configured for the appropriate database backend
    """
    settings = get_settings()
    database_url = settings.database_url

    if database_url.startswith("sqlite"):
        logger.info("Configuring SQLite database connection")
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=settings.sql_echo,
        )

    logger.info("Configuring database connection")
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=settings.sql_echo,
    )


# Create engine (lazy initialization to allow environment setup)
_engine = None


def get_engine():
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        _engine = _create_engine()
    return _engine


# Session factory (lazy initialization)
_session_local = None


def get_session_local():
    """Get or create the session factory."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_local


# Base class for models
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for FastAPI routes.
    Yields database session and ensures cleanup.
    """
    session_factory = get_session_local()
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.
    Use in standalone scripts and services.
    """
    session_factory = get_session_local()
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    """Create all tables in the database."""
    # Import models so they register with Base.metadata
    import proposal_maker.database.models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
