"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from tglogin.domain.model.account import AccountUpdate, LocalAccount, NewAccount
from tglogin.domain.value import AccountId, TelegramUserId


class AccountRepository(ABC):
    """Repository for local accounts.

    Defines the contract the login flow needs from the account store.
    Implementations live in the infrastructure layer.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[LocalAccount]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_external_id(
        self, external_id: TelegramUserId
    ) -> Optional[LocalAccount]:
        """Find the account linked to a Telegram user.

        Args:
            external_id: Telegram user ID stored in the account metadata

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def username_exists(self, login_name: str) -> bool:
        """Check whether a login name is taken.

        Args:
            login_name: Candidate login name

        Returns:
            True if an account uses it
        """
        pass

    @abstractmethod
    async def email_exists(self, email: str) -> bool:
        """Check whether an email address is taken.

        Args:
            email: Candidate email address

        Returns:
            True if an account uses it
        """
        pass

    @abstractmethod
    async def count_accounts(self) -> int:
        """Return the number of accounts in the store."""
        pass

    @abstractmethod
    async def create_account(self, fields: NewAccount) -> LocalAccount:
        """Create an account linked to a Telegram user.

        Args:
            fields: Account fields, including the Telegram user ID

        Returns:
            The created account

        Raises:
            ExternalIdTakenError: If another account already carries the ID
            AccountStoreError: If the store rejects the insert
        """
        pass

    @abstractmethod
    async def update_account(
        self, account_id: AccountId, fields: AccountUpdate
    ) -> LocalAccount:
        """Update an existing account.

        Args:
            account_id: Account to update
            fields: Fields to change

        Returns:
            The updated account

        Raises:
            AccountStoreError: If the account is missing or the update is rejected
        """
        pass

    @abstractmethod
    async def set_metadata(self, account_id: AccountId, key: str, value: str) -> None:
        """Insert or replace a single metadata entry.

        Args:
            account_id: Account to update
            key: Metadata key
            value: Metadata value

        Raises:
            ExternalIdTakenError: If writing the Telegram user ID would link
                it to a second account
        """
        pass
