"""In-memory account repository for testing."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from tglogin.domain.error import AccountStoreError, ExternalIdTakenError
from tglogin.domain.model import AccountUpdate, LocalAccount, NewAccount
from tglogin.domain.repository import AccountRepository
from tglogin.domain.value import (
    MAX_LOGIN_NAME_LENGTH,
    TELEGRAM_USER_ID_META_KEY,
    AccountId,
    TelegramUserId,
)
from tglogin.util.credentials import hash_password


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing.

    Enforces the same constraints as the PostgreSQL schema: unique login
    names no longer than the column and at most one account per Telegram
    user ID.
    """

    def __init__(self) -> None:
        self._accounts: dict[AccountId, LocalAccount] = {}
        self._password_hashes: dict[AccountId, str] = {}

    async def save(self, account: LocalAccount) -> LocalAccount:
        """Store an account as-is (test seeding)."""
        self._accounts[account.id] = account
        return account

    async def find_by_id(self, account_id: AccountId) -> Optional[LocalAccount]:
        """Find an account by ID."""
        return self._accounts.get(account_id)

    async def find_by_external_id(
        self, external_id: TelegramUserId
    ) -> Optional[LocalAccount]:
        """Find the account linked to a Telegram user ID."""
        for account in self._accounts.values():
            if account.metadata.get(TELEGRAM_USER_ID_META_KEY) == str(external_id):
                return account
        return None

    async def username_exists(self, login_name: str) -> bool:
        """Check whether a login name is taken."""
        return any(a.login_name == login_name for a in self._accounts.values())

    async def email_exists(self, email: str) -> bool:
        """Check whether an email address is taken."""
        return any(a.email == email for a in self._accounts.values())

    async def count_accounts(self) -> int:
        """Return the number of accounts."""
        return len(self._accounts)

    async def create_account(self, fields: NewAccount) -> LocalAccount:
        """Create an account linked to a Telegram user."""
        if await self.find_by_external_id(fields.external_id):
            raise ExternalIdTakenError(fields.external_id)
        if await self.username_exists(fields.login_name):
            raise AccountStoreError("Sorry, that username already exists!")
        if len(fields.login_name) > MAX_LOGIN_NAME_LENGTH:
            raise AccountStoreError(
                f"Username may not be longer than {MAX_LOGIN_NAME_LENGTH} characters."
            )

        now = datetime.now(timezone.utc)
        account = LocalAccount(
            id=AccountId(uuid4()),
            login_name=fields.login_name,
            first_name=fields.first_name,
            last_name=fields.last_name,
            roles=[fields.role],
            metadata={TELEGRAM_USER_ID_META_KEY: str(fields.external_id)},
            created_at=now,
            updated_at=now,
        )
        self._accounts[account.id] = account
        self._password_hashes[account.id] = hash_password(fields.password)
        return account

    async def update_account(
        self, account_id: AccountId, fields: AccountUpdate
    ) -> LocalAccount:
        """Update the non-None fields of an account."""
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountStoreError(f"Invalid account ID: {account_id}")

        changes = fields.model_dump(exclude_none=True)
        changes["updated_at"] = datetime.now(timezone.utc)
        updated = account.model_copy(update=changes)
        self._accounts[account_id] = updated
        return updated

    async def set_metadata(self, account_id: AccountId, key: str, value: str) -> None:
        """Insert or replace a metadata entry."""
        account = self._accounts.get(account_id)
        if account is None:
            raise AccountStoreError(f"Invalid account ID: {account_id}")

        if key == TELEGRAM_USER_ID_META_KEY:
            owner = await self.find_by_external_id(TelegramUserId(int(value)))
            if owner is not None and owner.id != account_id:
                raise ExternalIdTakenError(int(value))

        metadata = {**account.metadata, key: value}
        self._accounts[account_id] = account.model_copy(update={"metadata": metadata})

    def password_hash(self, account_id: AccountId) -> Optional[str]:
        """Stored password hash of an account (test inspection)."""
        return self._password_hashes.get(account_id)
