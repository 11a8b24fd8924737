"""Bootstrap component data models.

Frozen dataclasses for the orchestrated identity + welcome bootstrap.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from src.domain.errors import BootstrapError
from src.domain.participant import ParticipantId

_MESSAGES: dict[tuple[BootstrapError, str | None], str] = {
    (BootstrapError.UNAUTHORIZED, None): "You must be logged into a {host} account to use Wave.",
    (BootstrapError.INVALID_IDENTITY, None): "Failed to use {host} username correctly",
    (BootstrapError.STORAGE_ERROR, "account"): "Failed to create new {host} user",
    (BootstrapError.STORAGE_ERROR, "agent"): "Cannot fetch account data for robot",
    (BootstrapError.STORAGE_ERROR, "pointer"): "Failed to write waveId to file",
    (BootstrapError.STORAGE_ERROR, "pointer_read"): "Failed to read waveId from file",
    (BootstrapError.AGENT_ACCOUNT_MISSING, None): "Failed to fetch account data for robot",
    (BootstrapError.RPC_ERROR, None): "Failed to provision the welcome document",
}


def operator_message(error: BootstrapError, context: str | None, host_name: str) -> str:
    """Short human-readable message for a failed bootstrap."""
    template = _MESSAGES.get((error, context)) or _MESSAGES.get((error, None))
    if template is None:
        template = "Failed to set up {host} session"
    return template.format(host=host_name)


@dataclass(frozen=True)
class BootstrapInput:
    """Input parameters for the bootstrap operation."""

    session_identity: ParticipantId | None
    headers: Mapping[str, str]
    domain: str


@dataclass(frozen=True)
class BootstrapOutput:
    """Result of the bootstrap operation."""

    identity: ParticipantId | None = None
    document_id: str | None = None
    provisioned: bool = False
    created_document: bool = False
    skipped: bool = False
    success: bool = False
    error: BootstrapError | None = None
    error_context: str | None = None
    detail: str | None = None

    @property
    def redirect_to(self) -> str | None:
        return f"/#{self.document_id}" if self.document_id else None

    def message(self, host_name: str = "Sandstorm") -> str | None:
        if self.error is None:
            return None
        return operator_message(self.error, self.error_context, host_name)

    @classmethod
    def skipped_with(cls, identity: ParticipantId) -> BootstrapOutput:
        """Session already bound: nothing to bootstrap."""
        return cls(identity=identity, skipped=True, success=True)

    @classmethod
    def failed(
        cls,
        error: BootstrapError,
        detail: str | None,
        context: str | None = None,
        identity: ParticipantId | None = None,
        provisioned: bool = False,
    ) -> BootstrapOutput:
        return cls(
            identity=identity,
            provisioned=provisioned,
            success=False,
            error=error,
            error_context=context,
            detail=detail,
        )
