"""Authorization domain service.

Turns a raw Login Widget payload into a ``VerifiedIdentity``.
"""

import logfire
from pydantic import ValidationError

from tglogin.domain.error import InvalidPayloadError, LoginError
from tglogin.domain.model.identity import ExternalIdentity, VerifiedIdentity
from tglogin.domain.service.freshness import FreshnessChecker
from tglogin.domain.service.signature import SignatureVerifier
from tglogin.domain.value import TelegramUserId


class AuthorizationService:
    """Domain service that verifies Telegram login payloads."""

    def __init__(
        self, verifier: SignatureVerifier, freshness_checker: FreshnessChecker
    ) -> None:
        """Initialize authorization service.

        Args:
            verifier: Signature verifier bound to the bot token
            freshness_checker: Payload age check
        """
        self.verifier = verifier
        self.freshness_checker = freshness_checker

    def authorize(
        self, identity: ExternalIdentity, now: int | None = None
    ) -> VerifiedIdentity:
        """Verify signature and freshness, then type the payload.

        Args:
            identity: Payload as received
            now: Current unix time (defaults to the system clock)

        Returns:
            Verified identity

        Raises:
            UnauthorizedError: If the signature does not match
            ExpiredError: If the payload is too old
            InvalidPayloadError: If signed data is incomplete or malformed
        """
        with logfire.span("authorization_service.authorize", telegram_id=identity.id):
            try:
                fields = self.verifier.verify(identity.to_fields())
                auth_date = self.freshness_checker.check(fields, now=now)
            except LoginError as e:
                logfire.warn(
                    "Telegram payload rejected",
                    telegram_id=identity.id,
                    kind=e.kind.value,
                )
                raise

            if "id" not in fields or "first_name" not in fields:
                raise InvalidPayloadError("id and first_name are required")

            try:
                verified = VerifiedIdentity(
                    id=TelegramUserId(int(fields["id"])),
                    first_name=fields["first_name"],
                    last_name=fields.get("last_name"),
                    username=fields.get("username"),
                    photo_url=fields.get("photo_url"),
                    auth_date=auth_date,
                )
            except (ValueError, ValidationError) as e:
                raise InvalidPayloadError(f"id is not a Telegram user id: {e}")

            logfire.info(
                "Telegram payload verified",
                telegram_id=verified.id,
                username=verified.username,
            )
            return verified
