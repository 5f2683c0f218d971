"""Integration tests for PostgresAccountRepository.

Run against a migrated database (``python scripts/run_migrations.py``) with
``pytest -m integration``.
"""

import random
from uuid import uuid4

import pytest

from tglogin.domain.error import ExternalIdTakenError
from tglogin.domain.model import AccountUpdate, NewAccount
from tglogin.domain.repository import AccountRepository
from tglogin.domain.value import TELEGRAM_USER_ID_META_KEY, TelegramUserId
from tests.harness import create_env_fixture

# Integration test fixture
integration_env = create_env_fixture(unmock={"persistence"})

pytestmark = pytest.mark.integration


def new_account(external_id: int) -> NewAccount:
    return NewAccount(
        login_name=f"tg-{uuid4().hex[:12]}",
        password="s3cret",
        first_name="Alice",
        role="subscriber",
        external_id=TelegramUserId(external_id),
    )


def random_telegram_id() -> int:
    return random.randint(10**9, 10**10)


class TestAccountRepositoryIntegration:
    """Integration tests for PostgresAccountRepository."""

    @pytest.mark.asyncio
    async def test_create_and_find_by_external_id(self, integration_env):
        """A created account is found through its Telegram id."""
        # Arrange
        repo = await integration_env.get(AccountRepository)
        telegram_id = random_telegram_id()

        # Act
        created = await repo.create_account(new_account(telegram_id))
        found = await repo.find_by_external_id(TelegramUserId(telegram_id))

        # Assert
        assert found is not None
        assert found.id == created.id
        assert found.metadata[TELEGRAM_USER_ID_META_KEY] == str(telegram_id)
        assert await repo.username_exists(created.login_name)

    @pytest.mark.asyncio
    async def test_unique_index_rejects_second_account(self, integration_env):
        """The partial unique index reports a taken Telegram id."""
        repo = await integration_env.get(AccountRepository)
        telegram_id = random_telegram_id()
        await repo.create_account(new_account(telegram_id))

        with pytest.raises(ExternalIdTakenError):
            await repo.create_account(new_account(telegram_id))

    @pytest.mark.asyncio
    async def test_set_metadata_upserts(self, integration_env):
        repo = await integration_env.get(AccountRepository)
        account = await repo.create_account(new_account(random_telegram_id()))

        await repo.set_metadata(account.id, "avatar", "https://t.me/a.jpg")
        await repo.set_metadata(account.id, "avatar", "https://t.me/b.jpg")

        stored = await repo.find_by_id(account.id)
        assert stored.metadata["avatar"] == "https://t.me/b.jpg"

    @pytest.mark.asyncio
    async def test_update_account_sets_email(self, integration_env):
        repo = await integration_env.get(AccountRepository)
        account = await repo.create_account(new_account(random_telegram_id()))
        email = f"{uuid4().hex[:8]}@example.com"

        updated = await repo.update_account(account.id, AccountUpdate(email=email))

        assert updated.email == email
        assert await repo.email_exists(email)
