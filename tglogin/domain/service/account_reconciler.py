"""Account reconciliation domain service."""

import logfire

from tglogin.config import LoginSettings
from tglogin.domain.error import (
    AccountCreationFailedError,
    AccountStoreError,
    AccountUpdateFailedError,
    ExternalIdConflictError,
    ExternalIdTakenError,
    SignupDisabledError,
)
from tglogin.domain.model.account import AccountUpdate, LocalAccount, NewAccount
from tglogin.domain.model.decision import ReconciliationDecision
from tglogin.domain.model.identity import VerifiedIdentity
from tglogin.domain.repository.account import AccountRepository
from tglogin.domain.service.name_allocator import UniqueNameAllocator
from tglogin.domain.value import (
    MAX_LOGIN_NAME_LENGTH,
    TELEGRAM_USER_ID_META_KEY,
    TELEGRAM_USERNAME_META_KEY,
    DecisionAction,
)
from tglogin.util.credentials import generate_password
from tglogin.util.sanitize import escape_text, sanitize_login_name, sanitize_url


class AccountReconciler:
    """Applies a reconciliation decision to the account store.

    Every successful path ends by refreshing the Telegram metadata of the
    resulting account, so running the same attach twice leaves the store in
    the same state.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        name_allocator: UniqueNameAllocator,
        login_settings: LoginSettings,
    ) -> None:
        """Initialize account reconciler.

        Args:
            account_repository: Account repository
            name_allocator: Unique username allocator
            login_settings: Login configuration (role, avatar meta key)
        """
        self.account_repository = account_repository
        self.name_allocator = name_allocator
        self.login_settings = login_settings

    async def reconcile(
        self, decision: ReconciliationDecision, identity: VerifiedIdentity
    ) -> LocalAccount:
        """Execute a decision and return the resulting account.

        Args:
            decision: Output of the identity resolver
            identity: Verified Telegram identity

        Returns:
            Created or updated account with fresh Telegram metadata

        Raises:
            SignupDisabledError: For REJECT_SIGNUP_DISABLED (no mutation)
            AccountCreationFailedError: If the store rejects the new account
            AccountUpdateFailedError: If the store rejects the update
            AllocationExhaustedError: If no unique login name is found
        """
        with logfire.span(
            "account_reconciler.reconcile",
            action=decision.action.value,
            telegram_id=identity.id,
        ):
            if decision.action == DecisionAction.REJECT_SIGNUP_DISABLED:
                logfire.warn("Signup disabled, rejecting", telegram_id=identity.id)
                raise SignupDisabledError()

            if decision.action == DecisionAction.CREATE_NEW_ACCOUNT:
                account = await self._create_account(identity)
            elif decision.account is None:
                raise AccountUpdateFailedError("No account to attach to.")
            else:
                account = await self._update_account(decision.account, identity)

            await self._refresh_metadata(account, identity)

            # Re-read so callers see the metadata that was just written
            refreshed = await self.account_repository.find_by_id(account.id)
            return refreshed or account

    async def _create_account(self, identity: VerifiedIdentity) -> LocalAccount:
        """Create a new account for an unknown Telegram user."""
        username = identity.username
        if not username:
            username = sanitize_login_name(f"{identity.first_name}{identity.id}")

        account_count = await self.account_repository.count_accounts()
        # Leave room for the largest counter the allocator may append
        room = MAX_LOGIN_NAME_LENGTH - len(str(account_count + 1))
        username = username[:room].rstrip()
        login_name = await self.name_allocator.unique_username(
            username,
            self.account_repository.username_exists,
            max_attempts=account_count + 1,
        )

        fields = NewAccount(
            login_name=login_name,
            password=generate_password(),
            first_name=escape_text(identity.first_name),
            last_name=escape_text(identity.last_name or ""),
            role=self.login_settings.user_role,
            external_id=identity.id,
        )

        try:
            account = await self.account_repository.create_account(fields)
        except ExternalIdTakenError:
            # Another attempt created the account between lookup and insert
            winner = await self.account_repository.find_by_external_id(identity.id)
            if winner is None:
                raise AccountCreationFailedError(
                    "The Telegram account is being linked by another request."
                )
            logfire.warn(
                "Lost account creation race, attaching to existing account",
                telegram_id=identity.id,
                account_id=str(winner.id),
            )
            return await self._update_account(winner, identity)
        except AccountStoreError as e:
            logfire.error(
                "Account creation failed", telegram_id=identity.id, error=str(e)
            )
            raise AccountCreationFailedError(str(e))

        logfire.info(
            "Account created",
            account_id=str(account.id),
            login_name=account.login_name,
            telegram_id=identity.id,
        )
        return account

    async def _update_account(
        self, account: LocalAccount, identity: VerifiedIdentity
    ) -> LocalAccount:
        """Refresh the name fields of an existing account."""
        fields = AccountUpdate(
            first_name=escape_text(identity.first_name),
            last_name=escape_text(identity.last_name or ""),
        )
        try:
            updated = await self.account_repository.update_account(account.id, fields)
        except AccountStoreError as e:
            logfire.error(
                "Account update failed", account_id=str(account.id), error=str(e)
            )
            raise AccountUpdateFailedError(str(e))

        logfire.info(
            "Account updated", account_id=str(updated.id), telegram_id=identity.id
        )
        return updated

    async def _refresh_metadata(
        self, account: LocalAccount, identity: VerifiedIdentity
    ) -> None:
        """Write Telegram id, username and optionally the avatar URL."""
        try:
            await self.account_repository.set_metadata(
                account.id, TELEGRAM_USER_ID_META_KEY, str(identity.id)
            )
            await self.account_repository.set_metadata(
                account.id,
                TELEGRAM_USERNAME_META_KEY,
                escape_text(identity.username or ""),
            )

            meta_key = self.login_settings.avatar_meta_key
            if identity.photo_url and meta_key:
                photo_url = sanitize_url(identity.photo_url)
                if photo_url:
                    await self.account_repository.set_metadata(
                        account.id, meta_key, photo_url
                    )
        except ExternalIdTakenError:
            logfire.warn(
                "Telegram id linked to another account during metadata refresh",
                account_id=str(account.id),
                telegram_id=identity.id,
            )
            raise ExternalIdConflictError(identity.id)
        except AccountStoreError as e:
            logfire.error(
                "Account metadata update failed",
                account_id=str(account.id),
                error=str(e),
            )
            raise AccountUpdateFailedError(str(e))

    async def ensure_email(
        self, account: LocalAccount, local_part: str, host: str
    ) -> LocalAccount:
        """Give an account without email a unique placeholder address.

        Args:
            account: Account to check
            local_part: Fixed label for the address (not the username)
            host: Email domain

        Returns:
            The account, updated if an address was assigned

        Raises:
            AllocationExhaustedError: If no free address is found
            AccountUpdateFailedError: If the store rejects the update
        """
        if account.email:
            return account

        with logfire.span(
            "account_reconciler.ensure_email", account_id=str(account.id)
        ):
            account_count = await self.account_repository.count_accounts()
            email = await self.name_allocator.unique_email(
                local_part,
                host,
                self.account_repository.email_exists,
                max_attempts=account_count + 1,
            )
            try:
                updated = await self.account_repository.update_account(
                    account.id, AccountUpdate(email=email)
                )
            except AccountStoreError as e:
                logfire.error(
                    "Random email assignment failed",
                    account_id=str(account.id),
                    error=str(e),
                )
                raise AccountUpdateFailedError(str(e))

            logfire.info(
                "Random email assigned", account_id=str(account.id), email=email
            )
            return updated
