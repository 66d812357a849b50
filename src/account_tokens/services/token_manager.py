"""
Token lifecycle for a single account: list, add/rotate, delete.

Every call is one read-modify-write cycle against the ``UserStore``:
the account is fetched, its token map is changed in memory and written
back whole. Nothing is cached between calls.

Without ``account_locks`` two concurrent writers on the same account race
and the later write wins. Passing an ``AccountLocks`` serializes the cycle
per account name within this process.
"""

from __future__ import annotations

import contextlib
import logging
from typing import Callable, Dict, Optional

from account_tokens.core.errors import StorageError, TokenNotFound
from account_tokens.core.locks import AccountLocks
from account_tokens.core.token import (
    DEFAULT_NAME_PREFIX,
    fresh_token_value,
    generate_token_name,
    generate_token_value,
)
from account_tokens.models.token import TokenOperation, TokenResult
from account_tokens.services.user_store import UserStore

logger = logging.getLogger(__name__)


class TokenManager:
    def __init__(
        self,
        store: UserStore,
        *,
        name_prefix: str = DEFAULT_NAME_PREFIX,
        account_locks: Optional[AccountLocks] = None,
        value_factory: Callable[[], str] = generate_token_value,
    ) -> None:
        self.store = store
        self.name_prefix = name_prefix
        self.account_locks = account_locks
        self.value_factory = value_factory

    def _cycle(self, username: str):
        if self.account_locks is None:
            return contextlib.nullcontext()
        return self.account_locks.hold(username)

    def _write_tokens(self, username: str, tokens: Dict[str, str]) -> None:
        try:
            self.store.update(username, {"tokens": tokens})
        except StorageError:
            logger.warning("Storing tokens for account %s failed", username)
            raise

    @staticmethod
    def _check_username(username: str) -> None:
        if not username:
            raise ValueError("username must be a non-empty string.")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def generate_name(self) -> str:
        return generate_token_name(self.name_prefix)

    def list_tokens(self, username: str) -> Dict[str, str]:
        """Return the account's token map; empty if it has none yet."""
        self._check_username(username)
        account = self.store.get(username)
        return dict(account.tokens or {})

    def add_token(self, username: str, token_name: Optional[str] = None) -> TokenResult:
        """
        Create a token, or rotate it if ``token_name`` is already in use.

        Parameters
        ----------
        username : str
            Owning account.
        token_name : str, optional
            Used verbatim when given. When omitted a name is generated
            with this manager's prefix.

        Returns
        -------
        TokenResult
            ``operation`` is ``update`` when the name already existed
            before this call, ``insert`` otherwise; ``value`` is the new
            secret.
        """
        self._check_username(username)
        if token_name is None:
            token_name = self.generate_name()
        elif not token_name:
            raise ValueError("token_name must be a non-empty string.")

        with self._cycle(username):
            tokens = self.list_tokens(username)

            value = fresh_token_value(tokens.values(), self.value_factory)
            operation = TokenOperation.UPDATE if token_name in tokens else TokenOperation.INSERT

            tokens[token_name] = value
            self._write_tokens(username, tokens)

        logger.info("Token %s %s for account %s", token_name, operation.value, username)
        return TokenResult(operation=operation, name=token_name, value=value)

    def delete_token(self, username: str, token_name: str) -> None:
        """Revoke ``token_name``. Raises ``TokenNotFound`` if there is no such token."""
        self._check_username(username)
        with self._cycle(username):
            tokens = self.list_tokens(username)
            if token_name not in tokens:
                raise TokenNotFound(username, token_name)

            del tokens[token_name]
            self._write_tokens(username, tokens)

        logger.info("Token %s deleted for account %s", token_name, username)
