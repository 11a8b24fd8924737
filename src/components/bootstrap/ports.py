"""Bootstrap component port definitions.

Protocol interfaces for external dependencies. The bootstrap composes the
identity and welcome components, so its ports are the union of theirs.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from src.domain.entities import Account
from src.domain.participant import ParticipantId
from src.ports.documents import DocumentServicePort
from src.ports.pointer import WelcomePointerPort


class AccountStorePort(Protocol):
    """Persistent account store."""

    def get_account(self, participant: ParticipantId) -> Account | None:
        """Look up an account; None if absent."""
        ...

    def put_account(self, account: Account) -> None:
        """Persist a new account."""
        ...


class SecretHasherPort(Protocol):
    """Secret generation and digesting."""

    def generate_secret(self) -> str: ...

    def hash_password(self, plain: str) -> str: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


__all__ = [
    "AccountStorePort",
    "DocumentServicePort",
    "SecretHasherPort",
    "TimePort",
    "WelcomePointerPort",
]
