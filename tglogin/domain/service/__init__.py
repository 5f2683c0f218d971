"""Domain services."""

from .account_reconciler import AccountReconciler
from .authorization_service import AuthorizationService
from .freshness import FreshnessChecker
from .hooks import LoginHook, LoginHookContext, LoginHooks
from .identity_resolver import IdentityResolver
from .name_allocator import UniqueNameAllocator
from .redirect_policy import RedirectPolicy
from .session_service import SessionService
from .signature import SignatureVerifier

__all__ = [
    "AccountReconciler",
    "AuthorizationService",
    "FreshnessChecker",
    "IdentityResolver",
    "LoginHook",
    "LoginHookContext",
    "LoginHooks",
    "RedirectPolicy",
    "SessionService",
    "SignatureVerifier",
    "UniqueNameAllocator",
]
