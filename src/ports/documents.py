"""
Document service port.

The subset of the collaborative document RPC service the front door needs:
create a document, fetch one, add a participant, post a line, submit.
Operations are queued on a handle and sent by ``submit``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class RpcError(Exception):
    """Raised when a document service call fails."""

    def __init__(self, message: str, *, method: str | None = None) -> None:
        self.method = method
        super().__init__(message)


@dataclass
class DocumentHandle:
    """Client-side view of a document plus the operations queued against it."""

    document_id: str
    collection_id: str
    participants: set[str] = field(default_factory=set)
    root_item_id: str | None = None
    pending: list[dict[str, Any]] = field(default_factory=list)


class DocumentSessionPort(Protocol):
    """Document operations bound to one authenticated agent."""

    def create_document(self, domain: str, participants: set[str]) -> DocumentHandle:
        """Start a new document. The handle carries a provisional id until submit."""
        ...

    def fetch_document(self, document_id: str, collection_id: str) -> DocumentHandle: ...

    def add_participant(self, handle: DocumentHandle, address: str) -> None: ...

    def post_line(self, handle: DocumentHandle, text: str) -> None: ...

    def submit(self, handle: DocumentHandle) -> str:
        """Send queued operations; return the server-assigned document id."""
        ...


class DocumentServicePort(Protocol):
    def connect(self, agent_address: str, consumer_secret: str) -> DocumentSessionPort:
        """Return a document session authenticated as the given agent."""
        ...
