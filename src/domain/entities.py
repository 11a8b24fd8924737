from datetime import UTC, datetime
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from src.domain.participant import ParticipantId

# --- Enums / Literals ---
AccountKind = Literal["human", "agent"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


# --- Accounts ---


class Account(BaseModel):
    """Persisted account record, keyed by participant address.

    Human accounts carry a password digest that nobody ever types in (the
    trusted proxy authenticates them); agent accounts carry the consumer
    secret the document RPC service checks.
    """

    address: str
    kind: AccountKind = "human"
    password_digest: str | None = None
    consumer_secret: str | None = None
    locale: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_agent(self) -> bool:
        return self.kind == "agent"

    @classmethod
    def human(cls, participant: ParticipantId, password_digest: str, now: datetime) -> "Account":
        return cls(
            address=participant.address,
            kind="human",
            password_digest=password_digest,
            created_at=now,
        )

    @classmethod
    def agent(cls, participant: ParticipantId, consumer_secret: str, now: datetime) -> "Account":
        return cls(
            address=participant.address,
            kind="agent",
            consumer_secret=consumer_secret,
            created_at=now,
        )


# --- Sessions ---


class Session(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    address: str
    token: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=_utcnow)
