# src/account_tokens/services/token_gateway.py
"""
Request-facing side of the token core.

Turns "account + optional token name + how the caller authenticated"
into ``TokenManager`` calls and shapes the results into response
schemas. Errors from the manager pass through untouched; the transport
layer decides how to render them.
"""

import logging

from account_tokens.api.schemas import (
    TokenCreatedSchema,
    TokenDeletedSchema,
    TokenListSchema,
)
from account_tokens.models.auth_context import AuthContext
from account_tokens.services.token_manager import TokenManager

logger = logging.getLogger(__name__)


class TokenGateway:
    def __init__(self, manager: TokenManager) -> None:
        self.manager = manager

    def list_tokens(self, username: str, auth: AuthContext) -> TokenListSchema:
        """
        List the account's tokens as visible to this caller.

        A caller who authenticated with a token only ever sees that token.
        If it has meanwhile been revoked the result is empty.
        """
        tokens = self.manager.list_tokens(username)
        if auth.is_primary_credential:
            return TokenListSchema(api_tokens=tokens)

        own_value = tokens.get(auth.identity)
        if own_value is None:
            logger.warning(
                "Token %s used to authenticate for account %s is no longer present "
                "(revoked mid-session)",
                auth.identity,
                username,
            )
            return TokenListSchema(api_tokens={})
        return TokenListSchema(api_tokens={auth.identity: own_value})

    def add_named_token(self, username: str, token_name: str) -> TokenCreatedSchema:
        if not token_name:
            raise ValueError("token_name must be a non-empty string.")
        return self._created(self.manager.add_token(username, token_name))

    def add_generated_token(self, username: str) -> TokenCreatedSchema:
        return self._created(self.manager.add_token(username))

    def delete_token(self, username: str, token_name: str) -> TokenDeletedSchema:
        self.manager.delete_token(username, token_name)
        return TokenDeletedSchema(ok=True, id=token_name)

    @staticmethod
    def _created(result) -> TokenCreatedSchema:
        return TokenCreatedSchema(
            operation=result.operation, name=result.name, value=result.value
        )
