from datetime import datetime
from typing import Protocol

from src.domain.entities import Account
from src.domain.participant import ParticipantId


class AccountStorePort(Protocol):
    def get_account(self, participant: ParticipantId) -> Account | None: ...
    def put_account(self, account: Account) -> None: ...


class SecretHasherPort(Protocol):
    def generate_secret(self) -> str: ...
    def hash_password(self, plain: str) -> str: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
