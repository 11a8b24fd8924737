import pytest

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteAccountRepo
from tests.fakes import (
    PROJECT_ROOT,
    FakeDocumentService,
    FakeTime,
    InMemoryAccountStore,
    InMemoryPointer,
    agent_account,
)


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def account_store():
    return InMemoryAccountStore([agent_account()])


@pytest.fixture
def pointer():
    return InMemoryPointer()


@pytest.fixture
def documents():
    return FakeDocumentService()


@pytest.fixture
def db_path(tmp_path):
    path = str(tmp_path / "wave.db")
    SQLiteMigrator(path, str(PROJECT_ROOT / "migrations")).run_migrations()
    return path


@pytest.fixture
def account_repo(db_path):
    return SQLiteAccountRepo(db_path)
