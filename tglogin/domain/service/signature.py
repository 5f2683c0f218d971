"""Telegram Login Widget signature verification.

Telegram signs the callback parameters with a key derived from the bot token:

    data_check_string = "\n".join(sorted(f"{key}={value}" for every field but hash))
    secret_key = SHA256(bot_token)
    hash = hex(HMAC_SHA256(secret_key, data_check_string))

The sort runs over the whole ``key=value`` strings, not over keys alone.
"""

import hashlib
import hmac
from collections.abc import Mapping

from tglogin.domain.error import UnauthorizedError
from tglogin.domain.value import AUTH_FIELDS


def filter_auth_fields(fields: Mapping[str, str]) -> dict[str, str]:
    """Drop every field the widget does not sign."""
    return {key: value for key, value in fields.items() if key in AUTH_FIELDS}


def build_data_check_string(fields: Mapping[str, str]) -> str:
    """Build the newline-joined string the widget signs (hash excluded)."""
    pairs = [f"{key}={value}" for key, value in fields.items() if key != "hash"]
    pairs.sort()
    return "\n".join(pairs)


def compute_hash(fields: Mapping[str, str], bot_token: str) -> str:
    """Compute the lowercase hex signature of a payload."""
    secret_key = hashlib.sha256(bot_token.encode("utf-8")).digest()
    return hmac.new(
        secret_key,
        build_data_check_string(fields).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


class SignatureVerifier:
    """Checks a payload against the bot token. Pure, no I/O."""

    def __init__(self, bot_token: str) -> None:
        self._bot_token = bot_token

    def verify(self, fields: Mapping[str, str]) -> dict[str, str]:
        """Verify a payload and return it without the hash.

        Args:
            fields: Raw payload; unsigned fields are dropped first

        Returns:
            Signed fields, hash removed

        Raises:
            UnauthorizedError: If the hash is missing or does not match
        """
        data = filter_auth_fields(fields)
        check_hash = data.pop("hash", None)
        if not check_hash:
            raise UnauthorizedError()

        expected = compute_hash(data, self._bot_token)
        if not hmac.compare_digest(expected, check_hash):
            raise UnauthorizedError()

        return data
