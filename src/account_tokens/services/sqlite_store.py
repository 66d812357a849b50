# src/account_tokens/services/sqlite_store.py
"""
SQLite-backed ``UserStore``.

Each account is one row; the token map is kept as a JSON document in the
``tokens`` column and always rewritten whole, mirroring how the token core
treats the account as a record it reads and rewrites in full.
"""

from __future__ import annotations

import json
import sqlite3
import threading
from typing import Any, Dict, Optional

from account_tokens.core.errors import NotFound, StorageError
from account_tokens.models.account import Account
from account_tokens.services.user_store import UPDATABLE_FIELDS

_SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    username TEXT PRIMARY KEY,
    tokens   TEXT NOT NULL DEFAULT '{}'
)
"""


class SQLiteUserStore:
    def __init__(self, path: str = ":memory:") -> None:
        self.path = path
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            with self._conn:
                self._conn.execute(_SCHEMA)
        except sqlite3.Error as exc:
            raise StorageError(f"Could not open account database at {path}: {exc}") from exc

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def create(self, username: str, tokens: Optional[Dict[str, str]] = None) -> Account:
        if not username:
            raise ValueError("username must be a non-empty string.")
        with self._lock:
            try:
                with self._conn:
                    self._conn.execute(
                        "INSERT INTO accounts (username, tokens) VALUES (?, ?)",
                        (username, json.dumps(tokens or {})),
                    )
            except sqlite3.IntegrityError as exc:
                raise ValueError(f"Account '{username}' already exists.") from exc
            except sqlite3.Error as exc:
                raise StorageError(f"Could not create account '{username}': {exc}") from exc
        return Account(username=username, tokens=dict(tokens or {}))

    def delete(self, username: str) -> None:
        with self._lock:
            try:
                with self._conn:
                    cur = self._conn.execute(
                        "DELETE FROM accounts WHERE username = ?", (username,)
                    )
            except sqlite3.Error as exc:
                raise StorageError(f"Could not delete account '{username}': {exc}") from exc
        if cur.rowcount == 0:
            raise NotFound(username)

    def get(self, username: str) -> Account:
        with self._lock:
            try:
                row = self._conn.execute(
                    "SELECT username, tokens FROM accounts WHERE username = ?",
                    (username,),
                ).fetchone()
            except sqlite3.Error as exc:
                raise StorageError(f"Could not read account '{username}': {exc}") from exc
        if row is None:
            raise NotFound(username)
        return Account(username=row["username"], tokens=json.loads(row["tokens"] or "{}"))

    def update(self, username: str, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported account fields: {sorted(unknown)}")
        if not fields:
            # nothing to write, but the account must still exist
            self.get(username)
            return

        assignments = ", ".join(f"{column} = ?" for column in fields)
        params = [json.dumps(value) for value in fields.values()]
        params.append(username)

        with self._lock:
            try:
                with self._conn:
                    cur = self._conn.execute(
                        f"UPDATE accounts SET {assignments} WHERE username = ?",
                        params,
                    )
            except sqlite3.Error as exc:
                raise StorageError(f"Could not update account '{username}': {exc}") from exc
        if cur.rowcount == 0:
            raise NotFound(username)
