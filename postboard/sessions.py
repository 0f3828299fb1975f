"""
Postboard Backend - Session Store
==================================

What:  Server-held login sessions keyed by an opaque random token.
How:   The browser keeps only the token (cookie, see middleware/session.py);
       the username lives in this in-process store. One store per
       application instance, created in create_app().
Who:   Login creates a session, logout destroys it, the session middleware
       resolves the cookie on every request into a `Session` object that
       route handlers receive explicitly through `get_session`.

Session Lifecycle:
    anonymous ──login──▶ authenticated ──logout / max_age──▶ gone

Caveat:
    In-process state is only shared by the workers of one process. Running
    several uvicorn workers needs sticky sessions or an external store.
"""

import asyncio
import logging
import secrets
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from fastapi import Request

from postboard.exceptions import StoreError, UnauthenticatedError

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    The per-request view of the caller's session.

    An anonymous caller gets a Session with no id and no username.
    """

    session_id: Optional[str] = None
    username: Optional[str] = None
    created_at: float = field(default_factory=time.time)

    @property
    def is_authenticated(self) -> bool:
        return self.username is not None

    def require(self, message: str = "You are not logged in.") -> str:
        """Return the logged-in username or raise UnauthenticatedError."""
        if self.username is None:
            raise UnauthenticatedError(message=message)
        return self.username


class SessionStore:
    """
    In-memory session table guarded by an asyncio lock.

    Attributes:
        max_age: Seconds a session stays valid after creation.
    """

    def __init__(self, max_age: int = 86_400):
        self.max_age = max_age
        self._sessions: Dict[str, Session] = {}
        self._lock = asyncio.Lock()

    async def create(self, username: str) -> Session:
        session = Session(session_id=secrets.token_urlsafe(32), username=username)
        async with self._lock:
            self._purge_expired(time.time())
            self._sessions[session.session_id] = session
        logger.info("Session created for %s", username)
        return session

    async def get(self, session_id: str) -> Optional[Session]:
        """Return the live session for `session_id`, or None if unknown or expired."""
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if time.time() - session.created_at > self.max_age:
                del self._sessions[session_id]
                logger.debug("Session for %s expired", session.username)
                return None
            return session

    async def destroy(self, session_id: Optional[str]) -> None:
        """
        Remove a session.

        Raises:
            StoreError: The session is not in the store (already destroyed,
                expired, or never persisted).
        """
        async with self._lock:
            session = self._sessions.pop(session_id, None) if session_id else None
        if session is None:
            raise StoreError(
                message="Unable to log out",
                context={"reason": "session not found"},
            )
        logger.info("Session destroyed for %s", session.username)

    def __len__(self) -> int:
        return len(self._sessions)

    def _purge_expired(self, now: float) -> None:
        expired = [
            sid for sid, s in self._sessions.items()
            if now - s.created_at > self.max_age
        ]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Purged %d expired sessions", len(expired))


# ── FastAPI dependencies ──────────────────────────────────────────────────

def get_session(request: Request) -> Session:
    """The caller's session as resolved by SessionMiddleware (anonymous if none)."""
    return getattr(request.state, "session", None) or Session()


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store
