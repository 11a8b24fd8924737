import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Request

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.session_store import InMemorySessionStore
from src.adapters.clock import SystemClock
from src.adapters.fs.welcome_pointer import FileWelcomePointer
from src.adapters.rpc.document_service import RobotRpcDocumentService
from src.adapters.sqlite.repos import SQLiteAccountRepo
from src.components.client_page import ClientFlagTable
from src.components.identity import TrustedHeaderConfig
from src.components.session import VerifySessionInput, run_verify_session
from src.components.welcome import WelcomeConfig
from src.domain.participant import ParticipantId
from src.rules.loader import load_rules
from src.rules.models import ClientFlagRule, Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("WAVE_DATA_DIR", "./data"))
        self.db_path = f"{self.data_dir}/wave.db"
        self.rules_path = Path(os.environ.get("WAVE_RULES_PATH", str(self.base_dir / "rules.yaml")))
        self.migrations_dir = self.base_dir / "migrations"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


def get_header_config(rules: Rules = Depends(get_rules)) -> TrustedHeaderConfig:
    headers = rules.trusted_headers
    return TrustedHeaderConfig(
        username_header=headers.username_header,
        user_id_header=headers.user_id_header,
        whitespace_separator=headers.whitespace_separator,
    )


def get_welcome_config(rules: Rules = Depends(get_rules)) -> WelcomeConfig:
    welcome = rules.welcome
    return WelcomeConfig(
        agent_name=welcome.agent_name,
        pointer_mode=welcome.pointer_mode,
        collection_domain=welcome.collection_domain,
        collection_id=welcome.collection_id,
        greeting=welcome.greeting,
    )


@lru_cache
def _build_flag_table(flags: tuple[ClientFlagRule, ...]) -> ClientFlagTable:
    return ClientFlagTable.from_rules(flags)


def get_flag_table(rules: Rules = Depends(get_rules)) -> ClientFlagTable:
    """Flag table for the loaded rules, built once per distinct flag list."""
    return _build_flag_table(tuple(rules.client_flags))


# --- Repos ---
def get_account_repo(settings: Settings = Depends(get_settings)) -> SQLiteAccountRepo:
    return SQLiteAccountRepo(settings.db_path)


def get_pointer(rules: Rules = Depends(get_rules)) -> FileWelcomePointer:
    return FileWelcomePointer(rules.welcome.pointer_path)


# Document service singleton; owns a pooled HTTP client
_document_service_instance: RobotRpcDocumentService | None = None


def get_document_service(rules: Rules = Depends(get_rules)) -> RobotRpcDocumentService:
    """Get document service singleton."""
    global _document_service_instance
    if _document_service_instance is None:
        _document_service_instance = RobotRpcDocumentService(
            rules.rpc.url, timeout_s=rules.rpc.timeout_seconds
        )
    return _document_service_instance


def close_document_service() -> None:
    global _document_service_instance
    if _document_service_instance is not None:
        _document_service_instance.close()
        _document_service_instance = None


# Adapters needed for component injection
def get_auth_adapter() -> JWTAuthAdapter:
    return JWTAuthAdapter()


# Session store singleton for session component
_session_store_instance: InMemorySessionStore | None = None


def get_session_store() -> InMemorySessionStore:
    """Get session store singleton."""
    global _session_store_instance
    if _session_store_instance is None:
        _session_store_instance = InMemorySessionStore()
    return _session_store_instance


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# --- Session ---
def get_session_identity(
    request: Request,
    rules: Rules = Depends(get_rules),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    session_store: InMemorySessionStore = Depends(get_session_store),
    clock: SystemClock = Depends(get_clock),
) -> ParticipantId | None:
    """Participant bound to the request's session cookie, if any."""
    token = request.cookies.get(rules.sessions.cookie.name)
    if not token:
        return None

    result = run_verify_session(
        VerifySessionInput(token=token), auth_adapter, session_store, clock
    )
    return result.identity if result.success else None
