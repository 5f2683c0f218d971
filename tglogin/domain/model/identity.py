"""Telegram identity payloads.

``ExternalIdentity`` is the payload exactly as it arrived, restricted to the
fields Telegram signs. ``VerifiedIdentity`` is the typed result of a
successful signature and freshness check; only the authorization service
builds it.
"""

from collections.abc import Mapping
from typing import Optional

from tglogin.domain.value import AUTH_FIELDS, TelegramUserId
from tglogin.domain.value.common import ValueObject


class ExternalIdentity(ValueObject):
    """Unverified Login Widget payload. All values are raw strings."""

    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    photo_url: Optional[str] = None
    auth_date: Optional[str] = None
    hash: Optional[str] = None

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "ExternalIdentity":
        """Keep only the signed fields of a query string.

        Extra parameters (``action``, ``redirect_to``, routing leftovers) are
        dropped so they can never take part in verification.
        """
        return cls(
            **{key: value for key, value in params.items() if key in AUTH_FIELDS}
        )

    def to_fields(self) -> dict[str, str]:
        """Fields that were present in the request, hash included."""
        return self.model_dump(exclude_none=True)


class VerifiedIdentity(ValueObject):
    """Payload whose hash matched and whose auth_date is fresh."""

    id: TelegramUserId
    first_name: str
    last_name: Optional[str] = None
    username: Optional[str] = None
    photo_url: Optional[str] = None
    auth_date: int
