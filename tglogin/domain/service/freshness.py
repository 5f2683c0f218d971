"""Payload age check."""

import time
from collections.abc import Mapping

from tglogin.domain.error import ExpiredError, InvalidPayloadError

MAX_AUTH_AGE = 86400


class FreshnessChecker:
    """Rejects payloads older than ``max_age`` seconds.

    There is no lower bound: a payload dated in the future passes, which
    tolerates clock skew between Telegram and this server.
    """

    def __init__(self, max_age: int = MAX_AUTH_AGE) -> None:
        self.max_age = max_age

    def check(self, fields: Mapping[str, str], now: int | None = None) -> int:
        """Check ``auth_date`` of a verified payload.

        Args:
            fields: Verified payload
            now: Current unix time (defaults to the system clock)

        Returns:
            The parsed auth_date

        Raises:
            InvalidPayloadError: If auth_date is missing or not an integer
            ExpiredError: If the payload is older than the window
        """
        raw = fields.get("auth_date")
        try:
            auth_date = int(raw)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise InvalidPayloadError(f"auth_date is not a unix timestamp: {raw!r}")

        if now is None:
            now = int(time.time())

        if now - auth_date > self.max_age:
            raise ExpiredError()

        return auth_date
