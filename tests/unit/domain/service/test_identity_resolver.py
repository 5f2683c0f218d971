"""Unit tests for IdentityResolver."""

import pytest

from tglogin.domain.error import ExternalIdConflictError, LoginErrorKind
from tglogin.domain.model import VerifiedIdentity
from tglogin.domain.service import IdentityResolver
from tglogin.domain.value import DecisionAction, TelegramUserId
from tglogin.persistence.repository.inmemory import InMemoryAccountRepository
from tests.conftest import make_account

IDENTITY = VerifiedIdentity(
    id=TelegramUserId(424242), first_name="Alice", auth_date=1_700_000_000
)


class TestResolve:
    """Tests for IdentityResolver.resolve()."""

    @pytest.mark.asyncio
    async def test_returning_user_attaches_to_linked_account(self):
        """No session and a linked account: attach to that account."""
        # Arrange
        repo = InMemoryAccountRepository()
        linked = await repo.save(make_account("alice", telegram_id=424242))
        resolver = IdentityResolver(repo)

        # Act
        decision = await resolver.resolve(IDENTITY, None, signup_enabled=True)

        # Assert
        assert decision.action == DecisionAction.ATTACH_TO_EXISTING_EXTERNAL_USER
        assert decision.account.id == linked.id
        assert decision.from_session is False

    @pytest.mark.asyncio
    async def test_unknown_user_creates_account(self):
        """No session and no linked account: create one."""
        resolver = IdentityResolver(InMemoryAccountRepository())

        decision = await resolver.resolve(IDENTITY, None, signup_enabled=True)

        assert decision.action == DecisionAction.CREATE_NEW_ACCOUNT
        assert decision.account is None

    @pytest.mark.asyncio
    async def test_unknown_user_rejected_when_signup_disabled(self):
        """Signup disabled turns creation into a rejection decision."""
        resolver = IdentityResolver(InMemoryAccountRepository())

        decision = await resolver.resolve(IDENTITY, None, signup_enabled=False)

        assert decision.action == DecisionAction.REJECT_SIGNUP_DISABLED

    @pytest.mark.asyncio
    async def test_returning_user_allowed_when_signup_disabled(self):
        """Disabling signup does not lock out linked users."""
        repo = InMemoryAccountRepository()
        await repo.save(make_account("alice", telegram_id=424242))
        resolver = IdentityResolver(repo)

        decision = await resolver.resolve(IDENTITY, None, signup_enabled=False)

        assert decision.action == DecisionAction.ATTACH_TO_EXISTING_EXTERNAL_USER

    @pytest.mark.asyncio
    async def test_session_account_is_linked(self):
        """A logged-in user with an unlinked Telegram id links it."""
        # Arrange
        repo = InMemoryAccountRepository()
        current = await repo.save(make_account("bob"))
        resolver = IdentityResolver(repo)

        # Act
        decision = await resolver.resolve(IDENTITY, current, signup_enabled=False)

        # Assert
        assert decision.action == DecisionAction.ATTACH_TO_EXISTING_EXTERNAL_USER
        assert decision.account.id == current.id
        assert decision.from_session is True

    @pytest.mark.asyncio
    async def test_session_account_already_linked_to_same_id(self):
        """Logging in again from the linked session is a plain attach."""
        repo = InMemoryAccountRepository()
        current = await repo.save(make_account("alice", telegram_id=424242))
        resolver = IdentityResolver(repo)

        decision = await resolver.resolve(IDENTITY, current, signup_enabled=True)

        assert decision.account.id == current.id
        assert decision.from_session is True

    @pytest.mark.asyncio
    async def test_session_account_linked_to_other_id_is_repointed(self):
        """A session account may switch to a Telegram id nobody else holds."""
        repo = InMemoryAccountRepository()
        current = await repo.save(make_account("bob", telegram_id=111))
        resolver = IdentityResolver(repo)

        decision = await resolver.resolve(IDENTITY, current, signup_enabled=True)

        assert decision.action == DecisionAction.ATTACH_TO_EXISTING_EXTERNAL_USER
        assert decision.account.id == current.id

    @pytest.mark.asyncio
    async def test_conflict_when_id_linked_to_another_account(self):
        """The Telegram id belongs to someone other than the session user."""
        # Arrange
        repo = InMemoryAccountRepository()
        await repo.save(make_account("alice", telegram_id=424242))
        current = await repo.save(make_account("bob"))
        resolver = IdentityResolver(repo)

        # Act & Assert
        with pytest.raises(ExternalIdConflictError) as exc_info:
            await resolver.resolve(IDENTITY, current, signup_enabled=True)
        assert exc_info.value.kind == LoginErrorKind.EXTERNAL_ID_CONFLICT
        assert exc_info.value.is_business_rejection
