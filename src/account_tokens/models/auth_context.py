# src/account_tokens/models/auth_context.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AuthMethod(str, Enum):
    PASSWORD = "username/password"
    TOKEN = "token"


@dataclass(frozen=True)
class AuthContext:
    """How the caller of the current request proved who they are."""

    method: AuthMethod
    identity: Optional[str] = None  # token name, when method is TOKEN

    def __post_init__(self):
        object.__setattr__(self, "method", AuthMethod(self.method))
        if self.method == AuthMethod.TOKEN and not self.identity:
            raise ValueError("Token authentication requires the token name as identity.")

    @classmethod
    def password(cls, username: Optional[str] = None) -> "AuthContext":
        return cls(method=AuthMethod.PASSWORD, identity=username)

    @classmethod
    def token(cls, token_name: str) -> "AuthContext":
        return cls(method=AuthMethod.TOKEN, identity=token_name)

    @property
    def is_primary_credential(self) -> bool:
        return self.method == AuthMethod.PASSWORD
