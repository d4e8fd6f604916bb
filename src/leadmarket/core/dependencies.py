"""
Shared dependencies for FastAPI routes
"""
from typing import Generator, Optional
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from leadmarket.core.session import UserSession
from leadmarket.database.session import get_session


def get_db() -> Generator:
    """
    Database session dependency.
    Yields a database session from the pool and ensures it's closed after use.
    """
    db = get_session()
    try:
        yield db
    finally:
        db.close()


def get_user_session(
    x_user_id: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> Generator:
    """
    Caller session built from the authentication provider's user id header.
    The session is closed when the request finishes.
    """
    session = UserSession.open(db, x_user_id)
    try:
        yield session
    finally:
        session.close()


def get_admin_session(session: UserSession = Depends(get_user_session)) -> UserSession:
    """Caller session restricted to administrators."""
    session.require_admin()
    return session
