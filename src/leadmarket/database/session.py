"""
Database session management
"""
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker, Session
from typing import Optional

from leadmarket.core.config import settings
from leadmarket.database.connection import DatabasePool
from leadmarket.database.models import Base


# Session factory - will be initialized after pool is ready
SessionLocal: Optional[sessionmaker] = None


def init_session_factory() -> None:
    """
    Initialize the session factory with the database engine.
    Should be called after DatabasePool.initialize()
    """
    global SessionLocal
    if SessionLocal is None:
        engine = DatabasePool.get_engine()
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

        if not settings.database.is_sqlite and settings.database.schema and settings.database.schema != "public":
            @event.listens_for(engine, "connect")
            def set_search_path(dbapi_conn, connection_record):
                cursor = dbapi_conn.cursor()
                cursor.execute(f"SET search_path TO {settings.database.schema}, public")
                cursor.close()


def close_session_factory() -> None:
    """Forget the session factory; called at shutdown after the pool is closed."""
    global SessionLocal
    SessionLocal = None


def init_db() -> None:
    """
    Create all marketplace tables that do not exist yet.
    """
    engine = DatabasePool.get_engine()
    Base.metadata.create_all(bind=engine)


def get_session() -> Session:
    """
    Get a new database session from the pool.

    Raises:
        RuntimeError: If session factory is not initialized
    """
    if SessionLocal is None:
        init_session_factory()

    if SessionLocal is None:
        raise RuntimeError("Session factory not initialized. Call DatabasePool.initialize() first.")

    return SessionLocal()
