"""
================================================================================
MediaShelf - Database Configuration
================================================================================
SQLAlchemy database connection and session management.

USAGE:
    from mediashelf_app.database import get_db_session, init_database

    # Initialize database (create tables)
    init_database()

    # Use in routes/services
    with get_db_session() as session:
        entry = session.query(CatalogEntry).filter_by(title="Berserk").first()

CONFIGURATION:
    Set environment variable: DATABASE_URL
    Fallback: SQLite file next to the package (mediashelf.db)
================================================================================
"""

import os
from contextlib import contextmanager
from typing import Generator
from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import logging

from .models import Base

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE CONFIGURATION
# =============================================================================

def get_database_url() -> str:
    """
    Get database URL from environment or use SQLite fallback.

    Priority:
      1. DATABASE_URL environment variable
      2. Fallback to SQLite (mediashelf.db)
    """
    db_url = os.environ.get('DATABASE_URL')

    if db_url:
        # Handle Heroku's postgres:// -> postgresql://
        if db_url.startswith('postgres://'):
            db_url = db_url.replace('postgres://', 'postgresql://', 1)
        return db_url

    sqlite_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), 'mediashelf.db')
    db_url = f'sqlite:///{sqlite_path}'
    logger.warning(f"DATABASE_URL not set. Using SQLite fallback: {sqlite_path}")
    return db_url


def create_db_engine(db_url: str = None):
    """
    Create SQLAlchemy engine.

    SQLite: WAL mode for file databases, a single shared connection for
    in-memory ones (otherwise every session would see an empty database).
    """
    db_url = db_url or get_database_url()
    is_sqlite = db_url.startswith('sqlite://')

    if is_sqlite:
        in_memory = db_url in ('sqlite://', 'sqlite:///:memory:')
        kwargs = {'connect_args': {'check_same_thread': False}}
        if in_memory:
            kwargs['poolclass'] = StaticPool
        else:
            kwargs['connect_args']['timeout'] = 20  # Wait up to 20s for locks

        engine = create_engine(db_url, echo=False, **kwargs)

        if not in_memory:
            @event.listens_for(engine, "connect")
            def set_sqlite_pragma(dbapi_conn, connection_record):
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.close()
    else:
        engine = create_engine(
            db_url,
            echo=False,
            pool_size=10,
            max_overflow=20,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

    logger.info(f"Database engine created: {'SQLite' if is_sqlite else db_url.split(':', 1)[0]}")
    return engine


# Global engine and session factory
_engine = None
_SessionLocal = None


def get_engine():
    """Get or create the global database engine."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def get_session_factory():
    """Get or create the global session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            bind=get_engine(),
            autocommit=False,
            autoflush=False,
            expire_on_commit=False  # Keep objects usable after commit
        )
    return _SessionLocal


def reset_engine():
    """Dispose the global engine (tests switch DATABASE_URL between apps)."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


# =============================================================================
# SESSION MANAGEMENT
# =============================================================================

@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Auto-commits on success, rolls back and re-raises on exceptions.
    """
    SessionLocal = get_session_factory()
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        session.close()


# =============================================================================
# DATABASE INITIALIZATION
# =============================================================================

def init_database(drop_existing: bool = False):
    """
    Initialize database - create all tables.

    Args:
        drop_existing: If True, drop all tables first (DANGEROUS!)
    """
    engine = get_engine()

    if drop_existing:
        logger.warning("⚠️ DROPPING ALL TABLES - THIS WILL DELETE ALL DATA!")
        Base.metadata.drop_all(engine)

    Base.metadata.create_all(engine)
    logger.info("✅ Database tables ready")


def check_database_connection() -> bool:
    """Test database connection."""
    try:
        engine = get_engine()
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        return False
