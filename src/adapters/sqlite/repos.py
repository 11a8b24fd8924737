import sqlite3
from datetime import datetime
from typing import Any

from src.domain.entities import Account
from src.domain.participant import ParticipantId
from src.ports.accounts import AccountStoreError


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class SQLiteAccountRepo:
    """SQLite adapter for AccountStorePort.

    Every sqlite3 failure surfaces as AccountStoreError so callers can tell a
    missing account (None) from a broken store.
    """

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def get_account(self, participant: ParticipantId) -> Account | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute(
                    "SELECT * FROM accounts WHERE address = ?", (participant.address,)
                ).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise AccountStoreError(f"Failed to read account {participant}: {e}") from e

        if not row:
            return None
        return self._map_row(row)

    def put_account(self, account: Account) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO accounts (
                        address, kind, password_digest, consumer_secret, locale, created_at
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    ON CONFLICT(address) DO UPDATE SET
                        kind=excluded.kind,
                        password_digest=excluded.password_digest,
                        consumer_secret=excluded.consumer_secret,
                        locale=excluded.locale
                """,
                    (
                        account.address,
                        account.kind,
                        account.password_digest,
                        account.consumer_secret,
                        account.locale,
                        account.created_at.isoformat(),
                    ),
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise AccountStoreError(f"Failed to store account {account.address}: {e}") from e

    def list_all(self) -> list[Account]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT * FROM accounts ORDER BY address").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise AccountStoreError(f"Failed to list accounts: {e}") from e
        return [self._map_row(row) for row in rows]

    def _map_row(self, row: dict[str, Any]) -> Account:
        return Account(
            address=row["address"],
            kind=row["kind"],
            password_digest=row["password_digest"],
            consumer_secret=row["consumer_secret"],
            locale=row["locale"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )
