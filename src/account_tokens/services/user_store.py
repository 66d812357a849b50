# src/account_tokens/services/user_store.py
"""
Account storage seen from the token core.

The core only needs ``get`` and ``update``; anything that provides those
two calls with the documented failures can back a ``TokenManager``.
``InMemoryUserStore`` is the reference implementation used by tests and
small deployments.
"""

from __future__ import annotations

import copy
import threading
from typing import Any, Dict, Optional, Protocol

from account_tokens.core.errors import NotFound
from account_tokens.models.account import Account

# username is immutable; tokens is the only field the core rewrites
UPDATABLE_FIELDS = frozenset({"tokens"})


class UserStore(Protocol):
    def get(self, username: str) -> Account:
        """Return a full snapshot of the account or raise ``NotFound``."""
        ...

    def update(self, username: str, fields: Dict[str, Any]) -> None:
        """Merge ``fields`` into the stored account.

        Raises ``NotFound`` if the account is gone and ``StorageError``
        if the write itself fails.
        """
        ...


class InMemoryUserStore:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Dict[str, Dict[str, Any]] = {}

    def create(self, username: str, tokens: Optional[Dict[str, str]] = None) -> Account:
        if not username:
            raise ValueError("username must be a non-empty string.")
        with self._lock:
            if username in self._records:
                raise ValueError(f"Account '{username}' already exists.")
            self._records[username] = {"username": username, "tokens": dict(tokens or {})}
            return Account.from_record(copy.deepcopy(self._records[username]))

    def delete(self, username: str) -> None:
        with self._lock:
            if self._records.pop(username, None) is None:
                raise NotFound(username)

    def get(self, username: str) -> Account:
        with self._lock:
            record = self._records.get(username)
            if record is None:
                raise NotFound(username)
            return Account.from_record(copy.deepcopy(record))

    def update(self, username: str, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported account fields: {sorted(unknown)}")
        with self._lock:
            record = self._records.get(username)
            if record is None:
                raise NotFound(username)
            for key, value in fields.items():
                record[key] = copy.deepcopy(value)
