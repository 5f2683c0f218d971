"""Domain layer DI providers."""

from dishka import Scope, provide

from tglogin.config import AuthSettings, LoginSettings, SiteSettings
from tglogin.domain.repository import AccountRepository
from tglogin.domain.service import (
    AccountReconciler,
    AuthorizationService,
    FreshnessChecker,
    IdentityResolver,
    LoginHooks,
    RedirectPolicy,
    SessionService,
    SignatureVerifier,
    UniqueNameAllocator,
)
from tglogin.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider.

    Services that touch the account store are REQUEST-scoped to share the
    request's transaction. Stateless services and the hook registry live for
    the whole app.
    """

    scope = Scope.REQUEST

    @provide(scope=Scope.APP)
    def get_signature_verifier(
        self, login_settings: LoginSettings
    ) -> SignatureVerifier:
        """Provide signature verifier bound to the bot token."""
        return SignatureVerifier(bot_token=login_settings.bot_token or "")

    @provide(scope=Scope.APP)
    def get_freshness_checker(self, login_settings: LoginSettings) -> FreshnessChecker:
        """Provide freshness checker."""
        return FreshnessChecker(max_age=login_settings.max_auth_age)

    @provide(scope=Scope.APP)
    def get_authorization_service(
        self, verifier: SignatureVerifier, freshness_checker: FreshnessChecker
    ) -> AuthorizationService:
        """Provide payload authorization service."""
        return AuthorizationService(
            verifier=verifier, freshness_checker=freshness_checker
        )

    @provide(scope=Scope.APP)
    def get_name_allocator(self) -> UniqueNameAllocator:
        """Provide unique name allocator."""
        return UniqueNameAllocator()

    @provide(scope=Scope.APP)
    def get_redirect_policy(self, site_settings: SiteSettings) -> RedirectPolicy:
        """Provide redirect policy."""
        return RedirectPolicy(site_settings=site_settings)

    @provide(scope=Scope.APP)
    def get_login_hooks(self) -> LoginHooks:
        """Provide the login hook registry."""
        return LoginHooks()

    @provide
    def get_identity_resolver(
        self, account_repository: AccountRepository
    ) -> IdentityResolver:
        """Provide identity resolver."""
        return IdentityResolver(account_repository=account_repository)

    @provide
    def get_account_reconciler(
        self,
        account_repository: AccountRepository,
        name_allocator: UniqueNameAllocator,
        login_settings: LoginSettings,
    ) -> AccountReconciler:
        """Provide account reconciler."""
        return AccountReconciler(
            account_repository=account_repository,
            name_allocator=name_allocator,
            login_settings=login_settings,
        )

    @provide
    def get_session_service(
        self, account_repository: AccountRepository, auth_settings: AuthSettings
    ) -> SessionService:
        """Provide session service."""
        return SessionService(
            account_repository=account_repository, auth_settings=auth_settings
        )
