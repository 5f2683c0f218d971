"""Unit tests for SignatureVerifier."""

import pytest

from tglogin.domain.error import LoginErrorKind, UnauthorizedError
from tglogin.domain.service import SignatureVerifier
from tglogin.domain.service.signature import (
    build_data_check_string,
    compute_hash,
    filter_auth_fields,
)
from tests.conftest import BOT_TOKEN

FIELDS = {
    "auth_date": "1700000000",
    "first_name": "Alice",
    "id": "424242",
    "username": "alice",
}
EXPECTED_HASH = "35049287af166cf8a5c2185af84735d8b1bc0bfa9af176a54b1166c508003a80"


class TestDataCheckString:
    """Tests for build_data_check_string()."""

    def test_sorts_key_value_pairs_and_joins_with_newlines(self):
        """Pairs are sorted as whole strings and joined with LF."""
        # Arrange
        fields = {"username": "alice", "id": "424242", "auth_date": "1700000000"}

        # Act
        result = build_data_check_string(fields)

        # Assert
        assert result == "auth_date=1700000000\nid=424242\nusername=alice"

    def test_excludes_hash(self):
        """The hash never signs itself."""
        result = build_data_check_string({"id": "1", "hash": "abc"})

        assert result == "id=1"

    def test_filter_drops_unsigned_fields(self):
        """Routing parameters are not part of the signed payload."""
        fields = {**FIELDS, "action": "telegram_login", "redirect_to": "/x"}

        assert filter_auth_fields(fields) == FIELDS


class TestComputeHash:
    """Tests for compute_hash()."""

    def test_matches_known_vector(self):
        """Known payload and bot token produce the pinned digest."""
        assert compute_hash(FIELDS, BOT_TOKEN) == EXPECTED_HASH

    def test_depends_on_bot_token(self):
        """A different bot token yields a different digest."""
        assert compute_hash(FIELDS, "654321:OTHER-token") != EXPECTED_HASH


class TestSignatureVerifier:
    """Tests for SignatureVerifier.verify()."""

    def test_accepts_valid_payload_and_strips_hash(self):
        """A matching hash returns the signed fields without the hash."""
        # Arrange
        verifier = SignatureVerifier(BOT_TOKEN)

        # Act
        result = verifier.verify({**FIELDS, "hash": EXPECTED_HASH})

        # Assert
        assert result == FIELDS

    def test_ignores_extra_query_parameters(self):
        """Unsigned parameters neither break nor join verification."""
        verifier = SignatureVerifier(BOT_TOKEN)

        result = verifier.verify(
            {**FIELDS, "hash": EXPECTED_HASH, "action": "telegram_login"}
        )

        assert "action" not in result

    @pytest.mark.parametrize(
        "field,value",
        [
            ("first_name", "Alicia"),
            ("id", "424243"),
            ("auth_date", "1700000001"),
            ("username", "mallory"),
        ],
    )
    def test_rejects_tampered_field(self, field, value):
        """Changing any signed value invalidates the hash."""
        # Arrange
        verifier = SignatureVerifier(BOT_TOKEN)
        tampered = {**FIELDS, field: value, "hash": EXPECTED_HASH}

        # Act & Assert
        with pytest.raises(UnauthorizedError) as exc_info:
            verifier.verify(tampered)
        assert exc_info.value.kind == LoginErrorKind.UNAUTHORIZED

    def test_rejects_added_signed_field(self):
        """Adding a signed field the hash did not cover fails."""
        verifier = SignatureVerifier(BOT_TOKEN)

        with pytest.raises(UnauthorizedError):
            verifier.verify({**FIELDS, "last_name": "Smith", "hash": EXPECTED_HASH})

    def test_rejects_wrong_bot_token(self):
        """A payload signed for another bot is rejected."""
        verifier = SignatureVerifier("654321:OTHER-token")

        with pytest.raises(UnauthorizedError):
            verifier.verify({**FIELDS, "hash": EXPECTED_HASH})

    def test_rejects_missing_hash(self):
        """A payload without hash is unauthorized."""
        verifier = SignatureVerifier(BOT_TOKEN)

        with pytest.raises(UnauthorizedError) as exc_info:
            verifier.verify(FIELDS)
        assert exc_info.value.message == "Unauthorized! Data is NOT from Telegram"

    def test_rejects_uppercase_hash(self):
        """Telegram sends lowercase hex; other spellings do not match."""
        verifier = SignatureVerifier(BOT_TOKEN)

        with pytest.raises(UnauthorizedError):
            verifier.verify({**FIELDS, "hash": EXPECTED_HASH.upper()})
