"""PostgreSQL implementation of Account repository."""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import exists, func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tglogin.domain.error import AccountStoreError, ExternalIdTakenError
from tglogin.domain.model import AccountUpdate, LocalAccount, NewAccount
from tglogin.domain.repository import AccountRepository
from tglogin.domain.value import TELEGRAM_USER_ID_META_KEY, AccountId, TelegramUserId
from tglogin.persistence.mappers import row_to_account
from tglogin.persistence.tables import (
    EXTERNAL_ID_INDEX,
    account_meta_table,
    accounts_table,
)
from tglogin.util.credentials import hash_password


def _is_external_id_conflict(error: DBAPIError) -> bool:
    return isinstance(error, IntegrityError) and EXTERNAL_ID_INDEX in str(error.orig)


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[LocalAccount]:
        """Find an account by ID, with its metadata.

        Args:
            account_id: Account ID to look up

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        if not row:
            return None

        meta_stmt = select(account_meta_table).where(
            account_meta_table.c.account_id == account_id
        )
        meta_result = await self.session.execute(meta_stmt)
        return row_to_account(dict(row), [dict(m) for m in meta_result.mappings()])

    async def find_by_external_id(
        self, external_id: TelegramUserId
    ) -> Optional[LocalAccount]:
        """Find the account linked to a Telegram user ID.

        Args:
            external_id: Telegram user ID

        Returns:
            Account if found, None otherwise
        """
        stmt = (
            select(account_meta_table.c.account_id)
            .where(account_meta_table.c.meta_key == TELEGRAM_USER_ID_META_KEY)
            .where(account_meta_table.c.meta_value == str(external_id))
            .limit(1)
        )
        result = await self.session.execute(stmt)
        account_id = result.scalar_one_or_none()
        if account_id is None:
            return None
        return await self.find_by_id(AccountId(account_id))

    async def username_exists(self, login_name: str) -> bool:
        """Check whether a login name is taken."""
        stmt = select(exists().where(accounts_table.c.login_name == login_name))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def email_exists(self, email: str) -> bool:
        """Check whether an email address is taken."""
        stmt = select(exists().where(accounts_table.c.email == email))
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def count_accounts(self) -> int:
        """Return the number of accounts."""
        stmt = select(func.count()).select_from(accounts_table)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def create_account(self, fields: NewAccount) -> LocalAccount:
        """Insert an account and its Telegram user ID in one savepoint.

        Args:
            fields: New account fields

        Returns:
            Created account

        Raises:
            ExternalIdTakenError: If the Telegram user ID is already linked
            AccountStoreError: If the database rejects the insert for another
                reason, e.g. a value too long for its column
        """
        account_id = AccountId(uuid4())
        now = datetime.now(timezone.utc)

        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    accounts_table.insert().values(
                        id=account_id,
                        login_name=fields.login_name,
                        password_hash=hash_password(fields.password),
                        first_name=fields.first_name,
                        last_name=fields.last_name,
                        roles=[fields.role],
                        created_at=now,
                        updated_at=now,
                    )
                )
                await self.session.execute(
                    account_meta_table.insert().values(
                        account_id=account_id,
                        meta_key=TELEGRAM_USER_ID_META_KEY,
                        meta_value=str(fields.external_id),
                    )
                )
        except DBAPIError as e:
            if _is_external_id_conflict(e):
                raise ExternalIdTakenError(fields.external_id)
            raise AccountStoreError(f"Could not create account: {e.orig}")

        account = await self.find_by_id(account_id)
        if account is None:
            raise AccountStoreError("Created account could not be read back")
        return account

    async def update_account(
        self, account_id: AccountId, fields: AccountUpdate
    ) -> LocalAccount:
        """Update the non-None fields of an account.

        Args:
            account_id: Account to update
            fields: Fields to change

        Returns:
            Updated account

        Raises:
            AccountStoreError: If the account is missing or the update fails
        """
        values = fields.model_dump(exclude_none=True)
        values["updated_at"] = datetime.now(timezone.utc)

        stmt = (
            accounts_table.update()
            .where(accounts_table.c.id == account_id)
            .values(**values)
        )
        try:
            async with self.session.begin_nested():
                result = await self.session.execute(stmt)
        except DBAPIError as e:
            raise AccountStoreError(f"Could not update account: {e.orig}")

        if result.rowcount == 0:
            raise AccountStoreError(f"Invalid account ID: {account_id}")

        account = await self.find_by_id(account_id)
        if account is None:
            raise AccountStoreError(f"Invalid account ID: {account_id}")
        return account

    async def set_metadata(self, account_id: AccountId, key: str, value: str) -> None:
        """Upsert a metadata entry.

        Args:
            account_id: Account to update
            key: Metadata key
            value: Metadata value

        Raises:
            ExternalIdTakenError: If the Telegram user ID is linked elsewhere
            AccountStoreError: If the write fails for another reason
        """
        stmt = insert(account_meta_table).values(
            account_id=account_id, meta_key=key, meta_value=value
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[
                account_meta_table.c.account_id,
                account_meta_table.c.meta_key,
            ],
            set_={"meta_value": stmt.excluded.meta_value},
        )
        try:
            async with self.session.begin_nested():
                await self.session.execute(stmt)
        except DBAPIError as e:
            if _is_external_id_conflict(e):
                raise ExternalIdTakenError(int(value))
            raise AccountStoreError(f"Could not update account metadata: {e.orig}")
