"""
Account store port.

Persistent mapping from participant address to account data. Implementations:
SQLite (``src/adapters/sqlite/repos.py``).
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import Account
from src.domain.participant import ParticipantId


class AccountStoreError(Exception):
    """Raised when the account store cannot be read or written."""


class AccountStorePort(Protocol):
    def get_account(self, participant: ParticipantId) -> Account | None:
        """
        Look up the account for ``participant``.

        Raises:
            AccountStoreError: on I/O failure.
        """
        ...

    def put_account(self, account: Account) -> None:
        """
        Persist ``account``.

        Raises:
            AccountStoreError: on I/O failure.
        """
        ...
