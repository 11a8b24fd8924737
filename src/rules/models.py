from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

FlagType = Literal["string", "int", "bool", "float"]
PointerMode = Literal["legacy", "atomic"]


class ServerRules(BaseModel):
    domain: str
    http_frontend_addresses: list[str] = Field(default_factory=lambda: ["localhost:9898"])
    websocket_public_address: str = ""
    websocket_presented_address: str = ""
    analytics_account: str = ""

    @field_validator("http_frontend_addresses")
    @classmethod
    def _at_least_one_frontend(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("http_frontend_addresses must list at least one address")
        return value

    def resolved_websocket_address(self) -> str:
        return self.websocket_public_address or self.http_frontend_addresses[0]

    def resolved_presented_address(self) -> str:
        return self.websocket_presented_address or self.resolved_websocket_address()


class TrustedHeaderRules(BaseModel):
    host_name: str = "Sandstorm"
    username_header: str = "X-Sandstorm-Username"
    user_id_header: str = "X-Sandstorm-User-Id"
    whitespace_separator: str = "_"


class WelcomeRules(BaseModel):
    agent_name: str = "welcome-bot"
    pointer_path: str = "/var/mainWave.txt"
    pointer_mode: PointerMode = "legacy"
    collection_domain: str = "sandstorm"
    collection_id: str = "conv+root"
    greeting: str = "Welcome to {domain}!"


class RpcRules(BaseModel):
    url: str = "http://localhost:9898/robot/rpc"
    timeout_seconds: float = 10.0


class SessionCookieRules(BaseModel):
    name: str = "session"
    secure: bool = False
    http_only: bool = True
    same_site: Literal["lax", "strict", "none"] = "lax"


class SessionsRules(BaseModel):
    ttl_minutes: int = 60 * 24
    cookie: SessionCookieRules = Field(default_factory=SessionCookieRules)


class ClientFlagRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    key: str
    type: FlagType


class Rules(BaseModel):
    server: ServerRules
    trusted_headers: TrustedHeaderRules = Field(default_factory=TrustedHeaderRules)
    welcome: WelcomeRules = Field(default_factory=WelcomeRules)
    rpc: RpcRules = Field(default_factory=RpcRules)
    sessions: SessionsRules = Field(default_factory=SessionsRules)
    client_flags: list[ClientFlagRule] = Field(default_factory=list)
