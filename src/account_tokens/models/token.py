from dataclasses import dataclass
from enum import Enum


class TokenOperation(str, Enum):
    INSERT = "insert"
    UPDATE = "update"


@dataclass(frozen=True)
class TokenResult:
    operation: TokenOperation
    name: str
    value: str
