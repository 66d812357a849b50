from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Account:
    username: str
    tokens: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Account":
        tokens: Optional[Dict[str, str]] = record.get("tokens")
        return cls(username=record["username"], tokens=dict(tokens or {}))

    def __str__(self):
        return f"Account({self.username}, tokens={len(self.tokens)})"
