"""Application layer DI providers."""

from dishka import Scope, provide

from tglogin.application.usecase.auth import LoginUseCase
from tglogin.config import Settings
from tglogin.domain.service import (
    AccountReconciler,
    AuthorizationService,
    IdentityResolver,
    LoginHooks,
    RedirectPolicy,
    SessionService,
)
from tglogin.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider."""

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        authorization_service: AuthorizationService,
        identity_resolver: IdentityResolver,
        account_reconciler: AccountReconciler,
        session_service: SessionService,
        redirect_policy: RedirectPolicy,
        hooks: LoginHooks,
        settings: Settings,
    ) -> LoginUseCase:
        """Provide Telegram login use case."""
        return LoginUseCase(
            authorization_service=authorization_service,
            identity_resolver=identity_resolver,
            account_reconciler=account_reconciler,
            session_service=session_service,
            redirect_policy=redirect_policy,
            hooks=hooks,
            settings=settings,
        )
