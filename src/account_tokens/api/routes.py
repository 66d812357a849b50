import logging

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError
from typing import Callable, Optional

from account_tokens.api.schemas import ErrorResponseSchema
from account_tokens.core.errors import TokenError
from account_tokens.models.auth_context import AuthContext

logger = logging.getLogger(__name__)

AuthResolver = Callable[[object], Optional[AuthContext]]

GATEWAY_EXTENSION = "account_tokens.gateway"
AUTH_RESOLVER_EXTENSION = "account_tokens.auth_resolver"

api = Blueprint('tokens', __name__, url_prefix='/users/<username>/tokens')


class AuthenticationRequired(TokenError):
    http_status = 401

    def __init__(self):
        super().__init__("Request carries no authentication context")


def header_auth_resolver(req) -> Optional[AuthContext]:
    """Read the auth context left in request headers by the upstream auth layer."""
    method = req.headers.get(current_app.config["AUTH_METHOD_HEADER"])
    if not method:
        return None
    identity = req.headers.get(current_app.config["AUTH_IDENTITY_HEADER"])
    return AuthContext(method=method, identity=identity)


def _gateway():
    return current_app.extensions[GATEWAY_EXTENSION]


def _auth_context() -> AuthContext:
    resolver: AuthResolver = current_app.extensions[AUTH_RESOLVER_EXTENSION]
    auth = resolver(request)
    if auth is None:
        raise AuthenticationRequired()
    return auth


def _error(kind: str, detail: str, status: int):
    body = ErrorResponseSchema(error=kind, detail=detail)
    return jsonify(body.model_dump()), status


@api.errorhandler(TokenError)
def handle_token_error(err: TokenError):
    return _error(err.kind, err.message, err.http_status)


@api.errorhandler(ValidationError)
def handle_response_validation_error(err: ValidationError):
    # stored data did not fit a response schema; not the caller's fault
    logger.error("Response validation failed: %s", err)
    return _error("InternalError", "Stored account data is malformed", 500)


@api.errorhandler(ValueError)
def handle_bad_request(err: ValueError):
    return _error("BadRequest", str(err), 400)


@api.route('', methods=['GET'])
def list_tokens(username):
    tokens = _gateway().list_tokens(username, _auth_context())
    return jsonify(tokens.model_dump(by_alias=True)), 200

@api.route('', methods=['POST'])
def add_generated_token(username):
    _auth_context()
    created = _gateway().add_generated_token(username)
    return jsonify(created.model_dump(mode="json")), 201

@api.route('/<tokenname>', methods=['PUT'])
def add_or_update_token(username, tokenname):
    _auth_context()
    created = _gateway().add_named_token(username, tokenname)
    return jsonify(created.model_dump(mode="json")), 201

@api.route('/<tokenname>', methods=['DELETE'])
def delete_token(username, tokenname):
    _auth_context()
    deleted = _gateway().delete_token(username, tokenname)
    return jsonify(deleted.model_dump()), 201
