import os


class Config:
    DATABASE_PATH = os.environ.get("ACCOUNT_TOKENS_DB", "account_tokens.db")
    GENERATED_TOKEN_PREFIX = "gen_"  # marks system-generated token names
    SERIALIZE_ACCOUNT_WRITES = False  # per-account locking around read-modify-write
    LOG_LEVEL = os.environ.get("ACCOUNT_TOKENS_LOG_LEVEL", "INFO")
    AUTH_METHOD_HEADER = "X-Auth-Method"
    AUTH_IDENTITY_HEADER = "X-Auth-Identity"
    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    DATABASE_PATH = ":memory:"
    LOG_LEVEL = "DEBUG"
    TESTING = True
