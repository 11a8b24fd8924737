"""Identity component data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from src.domain.entities import Account
from src.domain.errors import BootstrapError
from src.domain.participant import ParticipantId


@dataclass(frozen=True)
class TrustedHeaderConfig:
    """Names of the headers the upstream proxy injects."""

    username_header: str = "X-Sandstorm-Username"
    user_id_header: str = "X-Sandstorm-User-Id"
    whitespace_separator: str = "_"


@dataclass(frozen=True)
class ResolveIdentityInput:
    session_identity: ParticipantId | None
    headers: Mapping[str, str]
    domain: str


@dataclass(frozen=True)
class ResolveIdentityOutput:
    identity: ParticipantId | None = None
    account: Account | None = None
    provisioned: bool = False
    from_session: bool = False
    external_user_id: str | None = None
    success: bool = False
    error: BootstrapError | None = None
    error_context: str | None = None
    detail: str | None = None

    @classmethod
    def failed(
        cls, error: BootstrapError, detail: str, context: str | None = None
    ) -> ResolveIdentityOutput:
        return cls(success=False, error=error, error_context=context, detail=detail)
