from unittest.mock import MagicMock

import pytest

from src.components.identity import (
    ResolveIdentityInput,
    TrustedHeaderConfig,
    normalize_username,
    read_trusted_headers,
    run,
)
from src.domain.errors import BootstrapError
from src.domain.participant import ParticipantId
from tests.fakes import FakeTime, InMemoryAccountStore

HEADERS = {"X-Sandstorm-Username": "Jane Doe", "X-Sandstorm-User-Id": "ext-123"}


@pytest.fixture
def hasher():
    adapter = MagicMock()
    adapter.generate_secret.return_value = "random-secret"
    adapter.hash_password.return_value = "digest"
    return adapter


def resolve(headers, store, hasher, domain="example.com", session=None):
    return run(
        ResolveIdentityInput(session_identity=session, headers=headers, domain=domain),
        account_repo=store,
        hasher=hasher,
        time=FakeTime(),
    )


def test_normalize_username_replaces_each_whitespace():
    assert normalize_username("  Jane  Doe\t") == "Jane__Doe"
    assert normalize_username("Jane Doe", separator=".") == "Jane.Doe"


def test_read_trusted_headers_is_case_insensitive():
    headers = {"x-sandstorm-username": "jane", "x-sandstorm-user-id": "u1"}
    assert read_trusted_headers(headers, TrustedHeaderConfig()) == ("jane", "u1")


def test_existing_session_skips_store():
    store = MagicMock()
    session = ParticipantId.of("bob@example.com")

    result = resolve({}, store, MagicMock(), session=session)

    assert result.success is True
    assert result.from_session is True
    assert result.identity == session
    store.get_account.assert_not_called()
    store.put_account.assert_not_called()


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"X-Sandstorm-Username": "jane"},
        {"X-Sandstorm-User-Id": "ext-1"},
        {"X-Sandstorm-Username": "   ", "X-Sandstorm-User-Id": "ext-1"},
        {"X-Sandstorm-Username": "jane", "X-Sandstorm-User-Id": ""},
    ],
)
def test_missing_headers_unauthorized_without_store_calls(headers):
    store = MagicMock()

    result = resolve(headers, store, MagicMock())

    assert result.success is False
    assert result.error == BootstrapError.UNAUTHORIZED
    store.get_account.assert_not_called()
    store.put_account.assert_not_called()


def test_invalid_username_is_invalid_identity(hasher):
    store = InMemoryAccountStore()
    headers = {"X-Sandstorm-Username": "jane-doe!", "X-Sandstorm-User-Id": "ext-1"}

    result = resolve(headers, store, hasher)

    assert result.error == BootstrapError.INVALID_IDENTITY
    assert store.get_calls == 0


def test_first_sight_provisions_one_account(hasher):
    store = InMemoryAccountStore()

    result = resolve(HEADERS, store, hasher)

    assert result.success is True
    assert result.provisioned is True
    assert result.identity.address == "Jane_Doe@example.com"
    assert result.external_user_id == "ext-123"
    assert store.put_calls == 1
    account = store.accounts["Jane_Doe@example.com"]
    assert account.kind == "human"
    assert account.password_digest == "digest"
    hasher.hash_password.assert_called_once_with("random-secret")


def test_second_request_does_not_provision_again(hasher):
    store = InMemoryAccountStore()

    first = resolve(HEADERS, store, hasher)
    second = resolve(HEADERS, store, hasher)

    assert first.identity == second.identity
    assert second.provisioned is False
    assert store.put_calls == 1
    assert len(store.accounts) == 1


def test_store_read_failure(hasher):
    result = resolve(HEADERS, InMemoryAccountStore(fail_on="get"), hasher)

    assert result.error == BootstrapError.STORAGE_ERROR
    assert result.error_context == "account"


def test_store_write_failure(hasher):
    result = resolve(HEADERS, InMemoryAccountStore(fail_on="put"), hasher)

    assert result.error == BootstrapError.STORAGE_ERROR
    assert result.error_context == "account"
    assert result.provisioned is False


def test_custom_header_names(hasher):
    config = TrustedHeaderConfig(username_header="X-User", user_id_header="X-Uid")
    store = InMemoryAccountStore()

    result = run(
        ResolveIdentityInput(
            session_identity=None, headers={"X-User": "ann", "X-Uid": "9"}, domain="example.com"
        ),
        account_repo=store,
        hasher=hasher,
        time=FakeTime(),
        config=config,
    )

    assert result.identity.address == "ann@example.com"
