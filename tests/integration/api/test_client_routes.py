import sqlite3

import pytest
from fastapi.testclient import TestClient

from src.adapters.auth.session_store import InMemorySessionStore
from src.adapters.fs.welcome_pointer import FileWelcomePointer
from src.api.deps import (
    get_account_repo,
    get_document_service,
    get_pointer,
    get_rules,
    get_session_store,
)
from src.api.main import app
from src.domain.participant import ParticipantId
from src.rules.models import Rules
from tests.fakes import FakeDocumentService, agent_account

JANE_HEADERS = {"X-Sandstorm-Username": "Jane Doe", "X-Sandstorm-User-Id": "ext-123"}
JANE = ParticipantId.of("Jane_Doe@example.com")


# --- Fixtures ---
@pytest.fixture
def rules(tmp_path):
    return Rules.model_validate(
        {
            "server": {
                "domain": "example.com",
                "http_frontend_addresses": ["localhost:9898"],
                "websocket_presented_address": "wave.example.com:443",
                "analytics_account": "UA-42",
            },
            "welcome": {"pointer_path": str(tmp_path / "var" / "mainWave.txt")},
            "client_flags": [{"name": "scrollSpeed", "key": "ss", "type": "float"}],
        }
    )


@pytest.fixture
def documents():
    return FakeDocumentService()


@pytest.fixture
def client(rules, account_repo, documents):
    account_repo.put_account(agent_account())
    session_store = InMemorySessionStore()

    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_account_repo] = lambda: account_repo
    app.dependency_overrides[get_pointer] = lambda: FileWelcomePointer(rules.welcome.pointer_path)
    app.dependency_overrides[get_document_service] = lambda: documents
    app.dependency_overrides[get_session_store] = lambda: session_store
    yield TestClient(app, follow_redirects=False)
    app.dependency_overrides.clear()


# --- Bootstrap ---
def test_first_visit_redirects_to_welcome_document(client, account_repo, documents, rules):
    response = client.get("/", headers=JANE_HEADERS)

    assert response.status_code == 302
    assert response.headers["location"] == "/#doc-1"
    assert "session" in response.cookies
    assert account_repo.get_account(JANE) is not None
    assert documents.documents["doc-1"] == {"Jane_Doe@example.com"}
    assert FileWelcomePointer(rules.welcome.pointer_path).read() == "doc-1"


def test_second_user_joins_same_document(client, documents):
    client.get("/", headers=JANE_HEADERS)
    client.cookies.clear()

    response = client.get(
        "/", headers={"X-Sandstorm-Username": "Bob", "X-Sandstorm-User-Id": "ext-9"}
    )

    assert response.headers["location"] == "/#doc-1"
    assert documents.created == ["doc-1"]
    assert documents.documents["doc-1"] == {"Jane_Doe@example.com", "Bob@example.com"}


def test_missing_headers_is_plain_500(client, account_repo):
    response = client.get("/")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == "You must be logged into a Sandstorm account to use Wave."
    assert account_repo.list_all() == [agent_account()]


def test_invalid_username_is_plain_500(client):
    response = client.get(
        "/", headers={"X-Sandstorm-Username": "jane-doe!", "X-Sandstorm-User-Id": "1"}
    )

    assert response.status_code == 500
    assert response.text == "Failed to use Sandstorm username correctly"


def test_missing_agent_keeps_user_account(client, account_repo, db_path):
    conn = sqlite3.connect(db_path)
    conn.execute("DELETE FROM accounts WHERE kind = 'agent'")
    conn.commit()
    conn.close()

    response = client.get("/", headers=JANE_HEADERS)

    assert response.status_code == 500
    assert response.text == "Failed to fetch account data for robot"
    assert account_repo.get_account(JANE) is not None


def test_rpc_failure_is_plain_500(client, documents):
    documents.fail_on = "create"

    response = client.get("/", headers=JANE_HEADERS)

    assert response.status_code == 500
    assert response.text == "Failed to provision the welcome document"


# --- Signed-in page ---
def test_session_cookie_serves_client_page(client, documents):
    client.get("/", headers=JANE_HEADERS)

    response = client.get("/?scrollSpeed=2.5&unknown=1")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert '"address": "Jane_Doe@example.com"' in response.text
    assert 'var __client_flags = {"ss": 2.5};' in response.text
    assert '"wave.example.com:443"' in response.text
    assert 'content="UA-42"' in response.text
    # No second bootstrap
    assert documents.created == ["doc-1"]


def test_signed_in_request_ignores_headers(client, documents):
    client.get("/", headers=JANE_HEADERS)

    response = client.get(
        "/", headers={"X-Sandstorm-Username": "Mallory", "X-Sandstorm-User-Id": "m"}
    )

    assert response.status_code == 200
    assert "Mallory" not in response.text


def test_stored_locale_redirects(client, account_repo):
    client.get("/", headers=JANE_HEADERS)
    account = account_repo.get_account(JANE)
    account_repo.put_account(account.model_copy(update={"locale": "fr"}))

    response = client.get("/?scrollSpeed=1")

    assert response.status_code == 302
    assert response.headers["location"] == "http://testserver/?scrollSpeed=1&locale=fr"

    response = client.get("/?scrollSpeed=1&locale=fr")
    assert response.status_code == 200


def test_bad_session_cookie_falls_back_to_headers(client):
    client.cookies.set("session", "forged")

    response = client.get("/", headers=JANE_HEADERS)

    assert response.status_code == 302


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
