"""Reconciliation decision."""

from typing import Optional

from tglogin.domain.model.account import LocalAccount
from tglogin.domain.model.common import DomainModel
from tglogin.domain.value import DecisionAction


class ReconciliationDecision(DomainModel):
    """What to do with a verified identity, computed once per attempt.

    ``account`` is set for ATTACH_TO_EXISTING_EXTERNAL_USER only.
    ``from_session`` marks an attach that targets the already logged-in
    account rather than a store match.
    """

    action: DecisionAction
    account: Optional[LocalAccount] = None
    from_session: bool = False

    @classmethod
    def attach(
        cls, account: LocalAccount, from_session: bool = False
    ) -> "ReconciliationDecision":
        return cls(
            action=DecisionAction.ATTACH_TO_EXISTING_EXTERNAL_USER,
            account=account,
            from_session=from_session,
        )

    @classmethod
    def create(cls) -> "ReconciliationDecision":
        return cls(action=DecisionAction.CREATE_NEW_ACCOUNT)

    @classmethod
    def reject_signup_disabled(cls) -> "ReconciliationDecision":
        return cls(action=DecisionAction.REJECT_SIGNUP_DISABLED)
