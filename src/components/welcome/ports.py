"""
Welcome component port definitions.

The pointer and document service ports are shared with the adapters; the
account port is narrowed to the single lookup this component makes.
"""

from typing import Protocol

from src.domain.entities import Account
from src.domain.participant import ParticipantId
from src.ports.documents import DocumentServicePort, DocumentSessionPort
from src.ports.pointer import WelcomePointerPort


class AgentAccountLookupPort(Protocol):
    def get_account(self, participant: ParticipantId) -> Account | None: ...


__all__ = [
    "AgentAccountLookupPort",
    "DocumentServicePort",
    "DocumentSessionPort",
    "WelcomePointerPort",
]
