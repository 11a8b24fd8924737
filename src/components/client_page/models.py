from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ClientPageInput:
    domain: str
    address: str | None
    username: str
    user_domain: str
    websocket_address: str
    flags: dict[str, Any] = field(default_factory=dict)
    analytics_account: str = ""
    id_seed: str | None = None


@dataclass(frozen=True)
class ClientPageOutput:
    html: str
    session_json: dict[str, Any]
