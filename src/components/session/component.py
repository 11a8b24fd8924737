from datetime import timedelta
from uuid import uuid4

from src.domain.entities import Session
from src.domain.participant import InvalidParticipantAddress, ParticipantId

from .models import CreateSessionInput, SessionOutput, VerifySessionInput
from .ports import SessionStorePort, TimePort, TokenAdapterPort


def run_create_session(
    inp: CreateSessionInput,
    auth_adapter: TokenAdapterPort,
    session_store: SessionStorePort,
    time: TimePort,
) -> SessionOutput:
    token = auth_adapter.create_token(inp.identity.address, inp.ttl_minutes)
    now = time.now_utc()

    session = Session(
        id=str(uuid4()),
        address=inp.identity.address,
        token=token,
        expires_at=now + timedelta(minutes=inp.ttl_minutes),
        created_at=now,
    )
    session_store.save(token, session)
    return SessionOutput(identity=inp.identity, session=session, token_raw=token, success=True)


def run_verify_session(
    inp: VerifySessionInput,
    auth_adapter: TokenAdapterPort,
    session_store: SessionStorePort,
    time: TimePort,
) -> SessionOutput:
    session = session_store.get(inp.token)
    if not session:
        return SessionOutput(success=False, error="Session not found")

    if session.expires_at < time.now_utc():
        session_store.delete(inp.token)
        return SessionOutput(success=False, error="Session expired")

    subject = auth_adapter.validate_token(inp.token)
    if subject != session.address:
        session_store.delete(inp.token)
        return SessionOutput(success=False, error="Invalid session token")

    try:
        identity = ParticipantId.of(session.address)
    except InvalidParticipantAddress:
        return SessionOutput(success=False, error="Invalid session address")

    return SessionOutput(identity=identity, session=session, token_raw=inp.token, success=True)


def run(
    inp: CreateSessionInput | VerifySessionInput,
    *,
    auth_adapter: TokenAdapterPort,
    session_store: SessionStorePort,
    time: TimePort,
) -> SessionOutput:
    if isinstance(inp, CreateSessionInput):
        return run_create_session(inp, auth_adapter, session_store, time)

    elif isinstance(inp, VerifySessionInput):
        return run_verify_session(inp, auth_adapter, session_store, time)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
