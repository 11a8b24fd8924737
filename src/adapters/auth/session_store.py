"""In-memory session store adapter.

This adapter implements SessionStorePort for the session component.
Sessions live as long as the process; a restart logs everyone out and the
trusted headers log them straight back in.
"""

import threading

from src.domain.entities import Session


class InMemorySessionStore:
    """In-memory session storage - suitable for single-process deployments."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def get(self, token: str) -> Session | None:
        """Get session by token."""
        with self._lock:
            return self._sessions.get(token)

    def save(self, token: str, session: Session) -> None:
        """Save session with token as key."""
        with self._lock:
            self._sessions[token] = session

    def delete(self, token: str) -> None:
        """Delete session by token."""
        with self._lock:
            self._sessions.pop(token, None)
