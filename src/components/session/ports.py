from datetime import datetime
from typing import Any, Protocol

from src.domain.entities import Session


class TokenAdapterPort(Protocol):
    def create_token(self, subject: str, ttl_minutes: int) -> str: ...
    def validate_token(self, token: str) -> Any | None: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class SessionStorePort(Protocol):
    """Port for session storage - removes global state from component."""

    def get(self, token: str) -> Session | None:
        """Get session by token."""
        ...

    def save(self, token: str, session: Session) -> None:
        """Save session with token as key."""
        ...

    def delete(self, token: str) -> None:
        """Delete session by token."""
        ...
