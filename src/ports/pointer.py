"""
Welcome document pointer port.

A single persisted scalar: the id of the server's one welcome document, or
nothing yet.

Invariants:
- at most one present value is intended server-wide
- ``write`` is last-writer-wins; ``try_initialize`` is compare-and-set
"""

from __future__ import annotations

from typing import Protocol


class PointerStoreError(Exception):
    """Raised when the pointer cannot be read or written."""


class WelcomePointerPort(Protocol):
    def read(self) -> str | None:
        """Return the stored document id, or None while absent."""
        ...

    def write(self, document_id: str) -> None:
        """Overwrite the pointer unconditionally."""
        ...

    def try_initialize(self, document_id: str) -> bool:
        """
        Set the pointer only if it is absent.

        Returns:
            True if this call stored ``document_id``, False if a value was
            already present.
        """
        ...
