"""Domain model entities for Telegram login."""

from tglogin.domain.model.account import AccountUpdate, LocalAccount, NewAccount
from tglogin.domain.model.decision import ReconciliationDecision
from tglogin.domain.model.identity import ExternalIdentity, VerifiedIdentity

__all__ = [
    "AccountUpdate",
    "ExternalIdentity",
    "LocalAccount",
    "NewAccount",
    "ReconciliationDecision",
    "VerifiedIdentity",
]
