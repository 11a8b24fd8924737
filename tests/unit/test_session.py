from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

import pytest

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.auth.session_store import InMemorySessionStore
from src.components.session import CreateSessionInput, VerifySessionInput, run
from src.domain.participant import ParticipantId
from tests.fakes import FakeTime

JANE = ParticipantId.of("jane@example.com")


class LaterTime:
    def __init__(self, minutes: int):
        self._now = FakeTime().now_utc() + timedelta(minutes=minutes)

    def now_utc(self):
        return self._now


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def auth():
    return JWTAuthAdapter()


def create(auth, store, ttl=60):
    return run(
        CreateSessionInput(identity=JANE, ttl_minutes=ttl),
        auth_adapter=auth,
        session_store=store,
        time=FakeTime(),
    )


def verify(token, auth, store, time=None):
    return run(
        VerifySessionInput(token=token),
        auth_adapter=auth,
        session_store=store,
        time=time or FakeTime(),
    )


def test_create_then_verify(auth, store):
    created = create(auth, store)

    assert created.success is True
    assert created.session.address == "jane@example.com"
    assert created.session.expires_at == datetime(2026, 1, 12, 13, 0, tzinfo=UTC)

    verified = verify(created.token_raw, auth, store)
    assert verified.success is True
    assert verified.identity == JANE


def test_unknown_token(auth, store):
    result = verify("nope", auth, store)

    assert result.success is False
    assert result.error == "Session not found"


def test_expired_session_is_removed(auth, store):
    created = create(auth, store, ttl=30)

    result = verify(created.token_raw, auth, store, time=LaterTime(31))

    assert result.success is False
    assert result.error == "Session expired"
    assert store.get(created.token_raw) is None


def test_subject_mismatch_is_rejected(store):
    auth = MagicMock()
    auth.create_token.return_value = "tok"
    create(auth, store)
    auth.validate_token.return_value = "mallory@example.com"

    result = verify("tok", auth, store)

    assert result.success is False
    assert result.error == "Invalid session token"
    assert store.get("tok") is None


def test_unknown_input_type(auth, store):
    with pytest.raises(ValueError):
        run(object(), auth_adapter=auth, session_store=store, time=FakeTime())
