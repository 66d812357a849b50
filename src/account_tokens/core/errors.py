class TokenError(Exception):
    """Base class for errors surfaced by the token core."""

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class NotFound(TokenError):
    http_status = 404

    def __init__(self, username: str):
        super().__init__(f"Account '{username}' does not exist")
        self.username = username


class TokenNotFound(TokenError):
    http_status = 404

    def __init__(self, username: str, token_name: str):
        super().__init__(f"Can't delete token '{token_name}', it does not exist")
        self.username = username
        self.token_name = token_name


class StorageError(TokenError):
    """Persistence failed; the original exception is kept as ``__cause__``."""

    http_status = 500
