"""
Session storage behind a small interface.

The dialogue logic only needs get-or-create and a bulk clear, so it
depends on `SessionStore` rather than on a module-level dict. The
default `InMemorySessionStore` keeps sessions for the lifetime of the
process with no eviction; a bounded or persisted store can replace it
without touching the responder.

Not safe for concurrent use across threads or processes: a deployment
running several workers needs a shared store instead.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from mavilda.schemas.session_schema import Session

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Capability interface for per-conversation state."""

    @abstractmethod
    def get_or_create(self, session_id: str) -> Session:
        """Return the session for `session_id`, creating it on first reference."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Session]:
        """Return the session if it exists, without creating it."""

    @abstractmethod
    def clear_all(self) -> int:
        """Delete every session and return how many were removed."""

    @abstractmethod
    def __len__(self) -> int: ...


class InMemorySessionStore(SessionStore):
    """Process-lifetime dict of sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get_or_create(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            session = Session(id=session_id)
            self._sessions[session_id] = session
            logger.debug("Session created: %s", session_id)
        return session

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def clear_all(self) -> int:
        count = len(self._sessions)
        self._sessions.clear()
        logger.info("Cleared %d sessions", count)
        return count

    def __len__(self) -> int:
        return len(self._sessions)
