"""Welcome component data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from src.domain.errors import BootstrapError
from src.domain.participant import ParticipantId

PointerMode = Literal["legacy", "atomic"]


@dataclass(frozen=True)
class WelcomeConfig:
    agent_name: str = "welcome-bot"
    pointer_mode: PointerMode = "legacy"
    collection_domain: str = "sandstorm"
    collection_id: str = "conv+root"
    greeting: str = "Welcome to {domain}!"

    @property
    def collection(self) -> str:
        return f"{self.collection_domain}!{self.collection_id}"


@dataclass(frozen=True)
class AttachParticipantInput:
    identity: ParticipantId
    domain: str


@dataclass(frozen=True)
class AttachParticipantOutput:
    document_id: str | None = None
    created: bool = False
    orphaned_document_id: str | None = None
    success: bool = False
    error: BootstrapError | None = None
    error_context: str | None = None
    detail: str | None = None

    @property
    def redirect_to(self) -> str | None:
        return f"/#{self.document_id}" if self.document_id else None

    @classmethod
    def failed(
        cls, error: BootstrapError, detail: str, context: str | None = None
    ) -> AttachParticipantOutput:
        return cls(success=False, error=error, error_context=context, detail=detail)
