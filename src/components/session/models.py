from dataclasses import dataclass

from src.domain.entities import Session
from src.domain.participant import ParticipantId


@dataclass
class CreateSessionInput:
    identity: ParticipantId
    ttl_minutes: int = 24 * 60


@dataclass
class VerifySessionInput:
    token: str


@dataclass
class SessionOutput:
    identity: ParticipantId | None = None
    session: Session | None = None
    token_raw: str | None = None
    success: bool = False
    error: str | None = None
