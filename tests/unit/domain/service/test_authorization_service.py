"""Unit tests for AuthorizationService."""

import pytest

from tglogin.domain.error import (
    ExpiredError,
    InvalidPayloadError,
    UnauthorizedError,
)
from tglogin.domain.model import ExternalIdentity
from tglogin.domain.service import (
    AuthorizationService,
    FreshnessChecker,
    SignatureVerifier,
)
from tests.conftest import BOT_TOKEN, make_payload, sign

NOW = 1_700_000_000


def make_service() -> AuthorizationService:
    return AuthorizationService(SignatureVerifier(BOT_TOKEN), FreshnessChecker())


class TestAuthorize:
    """Tests for AuthorizationService.authorize()."""

    def test_returns_typed_identity(self):
        """A valid payload becomes a VerifiedIdentity."""
        # Arrange
        payload = make_payload(
            auth_date=NOW,
            last_name="Smith",
            username="alice",
            photo_url="https://t.me/i/userpic/alice.jpg",
        )

        # Act
        identity = make_service().authorize(
            ExternalIdentity.from_query(payload), now=NOW
        )

        # Assert
        assert identity.id == 424242
        assert identity.first_name == "Alice"
        assert identity.last_name == "Smith"
        assert identity.username == "alice"
        assert identity.photo_url == "https://t.me/i/userpic/alice.jpg"
        assert identity.auth_date == NOW

    def test_checks_signature_before_freshness(self):
        """A forged stale payload is reported as unauthorized."""
        payload = make_payload(auth_date=NOW - 100_000)
        payload["first_name"] = "Mallory"

        with pytest.raises(UnauthorizedError):
            make_service().authorize(ExternalIdentity.from_query(payload), now=NOW)

    def test_rejects_stale_payload(self):
        """A genuine but old payload has expired."""
        payload = make_payload(auth_date=NOW - 100_000)

        with pytest.raises(ExpiredError):
            make_service().authorize(ExternalIdentity.from_query(payload), now=NOW)

    def test_rejects_signed_payload_without_first_name(self):
        """id and first_name are required even when correctly signed."""
        fields = {"id": "424242", "auth_date": str(NOW)}
        fields["hash"] = sign(fields)

        with pytest.raises(InvalidPayloadError):
            make_service().authorize(ExternalIdentity.from_query(fields), now=NOW)

    def test_rejects_non_numeric_id(self):
        """The Telegram id must be an integer."""
        fields = {"id": "alice", "first_name": "Alice", "auth_date": str(NOW)}
        fields["hash"] = sign(fields)

        with pytest.raises(InvalidPayloadError):
            make_service().authorize(ExternalIdentity.from_query(fields), now=NOW)
