from pydantic import BaseModel, ConfigDict, Field
from typing import Dict

from account_tokens.models.token import TokenOperation


class TokenListSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    api_tokens: Dict[str, str] = Field(default_factory=dict, alias="apiTokens")

class TokenCreatedSchema(BaseModel):
    operation: TokenOperation
    name: str
    value: str

class TokenDeletedSchema(BaseModel):
    ok: bool = True
    id: str

class ErrorResponseSchema(BaseModel):
    error: str
    detail: str
