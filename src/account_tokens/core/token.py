"""
Token name and value generation.

Values are uuid4 hex strings (122 random bits from ``os.urandom``).
Generated names carry a prefix so they can be told apart from names
chosen by the account owner, followed by a short base-36 fragment.
"""

import logging
import secrets
import uuid
from typing import Callable, Iterable

from account_tokens.utils.helpers import to_base36

logger = logging.getLogger(__name__)

DEFAULT_NAME_PREFIX = "gen_"
_NAME_FRAGMENT_SPACE = 10 ** 9


def generate_token_value() -> str:
    return uuid.uuid4().hex


def generate_token_name(prefix: str = DEFAULT_NAME_PREFIX) -> str:
    return prefix + to_base36(secrets.randbelow(_NAME_FRAGMENT_SPACE))


def fresh_token_value(
    existing_values: Iterable[str],
    factory: Callable[[], str] = generate_token_value,
) -> str:
    """
    Return a value from ``factory`` that is not among ``existing_values``.

    Keeps drawing until there is no collision, so the result is always
    distinct from every value already held by the account.
    """
    taken = set(existing_values)
    value = factory()
    while value in taken:
        logger.debug("Generated token value collided with an existing one, retrying")
        value = factory()
    return value
