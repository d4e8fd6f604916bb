"""
Per-request user session passed explicitly into every workflow
"""
from typing import Optional
from sqlalchemy.orm import Session

from leadmarket.database.models import User
from leadmarket.utils.exceptions import AdminRequired, NotAuthenticated, SessionClosed
from leadmarket.utils.logging import get_logger

logger = get_logger(__name__)

ADMIN_ROLE = "admin"
MARKETER_ROLE = "marketer"


class UserSession:
    """
    Identity of the caller as supplied by the authentication provider.

    A session is opened with `open()` when a request starts and closed with
    `close()` on teardown (sign-out or end of request). Workflows read the
    user through `user_id` / `is_admin`, which fail once the session is closed.
    """

    def __init__(self, user_id: str, role: str, email: Optional[str] = None):
        self._user_id = user_id
        self._role = role
        self.email = email
        self._active = True

    @classmethod
    def open(cls, db: Session, user_id: Optional[str]) -> "UserSession":
        """
        Load the caller's role from the users table and start a session.

        Raises:
            NotAuthenticated: No user id supplied or unknown user
        """
        if not user_id:
            raise NotAuthenticated("Authentication required")

        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise NotAuthenticated(f"Unknown user '{user_id}'")

        logger.debug(f"[dim]Session opened for {user.id} ({user.role})[/dim]")
        return cls(user_id=user.id, role=user.role, email=user.email)

    def close(self) -> None:
        if self._active:
            logger.debug(f"[dim]Session closed for {self._user_id}[/dim]")
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def _ensure_active(self) -> None:
        if not self._active:
            raise SessionClosed("Session has ended, sign in again")

    @property
    def user_id(self) -> str:
        self._ensure_active()
        return self._user_id

    @property
    def role(self) -> str:
        self._ensure_active()
        return self._role

    @property
    def is_admin(self) -> bool:
        return self.role == ADMIN_ROLE

    def require_admin(self) -> None:
        if not self.is_admin:
            raise AdminRequired("Administrator role required")
