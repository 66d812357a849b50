from flask import Flask

from account_tokens.api.routes import (
    AUTH_RESOLVER_EXTENSION,
    GATEWAY_EXTENSION,
    api,
    header_auth_resolver,
)
from account_tokens.config import Config
from account_tokens.core.locks import AccountLocks
from account_tokens.services.sqlite_store import SQLiteUserStore
from account_tokens.services.token_gateway import TokenGateway
from account_tokens.services.token_manager import TokenManager
from account_tokens.utils.helpers import configure_logging


def create_app(config_object=Config, user_store=None, auth_resolver=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    configure_logging(app.config["LOG_LEVEL"])

    if user_store is None:
        user_store = SQLiteUserStore(app.config["DATABASE_PATH"])

    manager = TokenManager(
        user_store,
        name_prefix=app.config["GENERATED_TOKEN_PREFIX"],
        account_locks=AccountLocks() if app.config["SERIALIZE_ACCOUNT_WRITES"] else None,
    )

    app.extensions["account_tokens.user_store"] = user_store
    app.extensions[GATEWAY_EXTENSION] = TokenGateway(manager)
    app.extensions[AUTH_RESOLVER_EXTENSION] = auth_resolver or header_auth_resolver

    app.register_blueprint(api)

    return app

if __name__ == "__main__":
    app = create_app()
    app.run(debug=app.config["DEBUG"])
