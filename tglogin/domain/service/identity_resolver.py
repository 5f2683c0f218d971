"""Identity resolution domain service."""

from typing import Optional

import logfire

from tglogin.domain.error import ExternalIdConflictError
from tglogin.domain.model.account import LocalAccount
from tglogin.domain.model.decision import ReconciliationDecision
from tglogin.domain.model.identity import VerifiedIdentity
from tglogin.domain.repository.account import AccountRepository


class IdentityResolver:
    """Decides how a verified identity maps onto a local account.

    Precedence: the logged-in account, then the account already linked to
    the Telegram id, then a new account.
    """

    def __init__(self, account_repository: AccountRepository) -> None:
        """Initialize identity resolver.

        Args:
            account_repository: Account repository
        """
        self.account_repository = account_repository

    async def resolve(
        self,
        identity: VerifiedIdentity,
        current: Optional[LocalAccount],
        signup_enabled: bool,
    ) -> ReconciliationDecision:
        """Compute the reconciliation decision for one login attempt.

        Args:
            identity: Verified Telegram identity
            current: Account of the active session, if any
            signup_enabled: Whether unknown users may get a new account

        Returns:
            Reconciliation decision

        Raises:
            ExternalIdConflictError: If the Telegram id is linked to an account
                other than the logged-in one
        """
        with logfire.span(
            "identity_resolver.resolve",
            telegram_id=identity.id,
            has_session=current is not None,
        ):
            returning = await self.account_repository.find_by_external_id(identity.id)

            if current is not None:
                if returning is not None and returning.id != current.id:
                    logfire.warn(
                        "Telegram id linked to another account",
                        telegram_id=identity.id,
                        session_account_id=str(current.id),
                        linked_account_id=str(returning.id),
                    )
                    raise ExternalIdConflictError(identity.id)
                decision = ReconciliationDecision.attach(current, from_session=True)

            elif returning is not None:
                decision = ReconciliationDecision.attach(returning)

            elif not signup_enabled:
                decision = ReconciliationDecision.reject_signup_disabled()

            else:
                decision = ReconciliationDecision.create()

            logfire.info(
                "Identity resolved",
                telegram_id=identity.id,
                action=decision.action.value,
                from_session=decision.from_session,
            )
            return decision
