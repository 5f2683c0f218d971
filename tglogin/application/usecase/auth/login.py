"""Telegram login use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from tglogin.application.usecase.base import BaseUseCase
from tglogin.config import Settings
from tglogin.domain.model.account import LocalAccount
from tglogin.domain.model.identity import ExternalIdentity, VerifiedIdentity
from tglogin.domain.service import (
    AccountReconciler,
    AuthorizationService,
    IdentityResolver,
    LoginHookContext,
    LoginHooks,
    RedirectPolicy,
    SessionService,
)
from tglogin.domain.value import DecisionAction, LoginHookPoint


class LoginRequest(BaseModel):
    """Login Widget callback.

    ``params`` holds the whole query string; only the signed fields take
    part in verification.
    """

    params: dict[str, str]
    session_token: Optional[str] = None  # Session cookie, if any

    @property
    def redirect_to(self) -> Optional[str]:
        return self.params.get("redirect_to")


class LoginResponse(BaseModel):
    """Login response."""

    account_id: str
    login_name: str
    redirect_to: str
    created: bool
    # Set only when a new session was issued
    session_token: Optional[str] = None


class LoginUseCase(BaseUseCase[LoginRequest, Optional[LoginResponse]]):
    """Use case for logging in through the Telegram Login Widget."""

    def __init__(
        self,
        authorization_service: AuthorizationService,
        identity_resolver: IdentityResolver,
        account_reconciler: AccountReconciler,
        session_service: SessionService,
        redirect_policy: RedirectPolicy,
        hooks: LoginHooks,
        settings: Settings,
    ) -> None:
        """Initialize login use case.

        Args:
            authorization_service: Payload verification
            identity_resolver: Maps the identity to a reconciliation decision
            account_reconciler: Applies the decision to the account store
            session_service: Session lookup and issuing
            redirect_policy: Post-login redirect rules
            hooks: Extension point observers
            settings: Application settings
        """
        self.authorization_service = authorization_service
        self.identity_resolver = identity_resolver
        self.account_reconciler = account_reconciler
        self.session_service = session_service
        self.redirect_policy = redirect_policy
        self.hooks = hooks
        self.settings = settings

    def is_login_request(self, request: LoginRequest) -> bool:
        """Whether the request is a login callback this service should handle.

        Requests without the login action, hash or auth_date are ordinary
        page views. Without a bot token the whole flow is off.
        """
        params = request.params
        return (
            bool(self.settings.login.bot_token)
            and params.get("action") == self.settings.login.action
            and "hash" in params
            and "auth_date" in params
        )

    async def execute(self, request: LoginRequest) -> Optional[LoginResponse]:
        """Execute the Telegram login flow.

        Steps:
        1. Ignore requests that are not login callbacks
        2. Verify signature and freshness of the payload
        3. Resolve the identity against the session and the account store
        4. Create or update the account and its Telegram metadata
        5. Issue a session if the user was not logged in
        6. Optionally assign a placeholder email
        7. Compute the redirect target

        Args:
            request: Login request with the callback query parameters

        Returns:
            Login response, or None when the request is not a login attempt

        Raises:
            LoginError: If any step rejects the attempt
        """
        if not self.is_login_request(request):
            return None

        payload = ExternalIdentity.from_query(request.params)

        with logfire.span("login_use_case.execute", telegram_id=payload.id):
            await self._dispatch(LoginHookPoint.BEFORE_VERIFY, payload)

            identity = self.authorization_service.authorize(payload)

            await self._dispatch(LoginHookPoint.PRE_SAVE, payload, identity)

            current = await self.session_service.find_session_account(
                request.session_token
            )
            decision = await self.identity_resolver.resolve(
                identity,
                current,
                signup_enabled=not self.settings.login.disable_signup,
            )
            account = await self.account_reconciler.reconcile(decision, identity)
            created = decision.action == DecisionAction.CREATE_NEW_ACCOUNT

            await self._dispatch(
                LoginHookPoint.AFTER_SAVE, payload, identity, account, created
            )

            session_token = None
            if current is None:
                await self._dispatch(
                    LoginHookPoint.BEFORE_LOGIN, payload, identity, account, created
                )
                session_token = self.session_service.establish_session(account)
                await self._dispatch(
                    LoginHookPoint.AFTER_LOGIN, payload, identity, account, created
                )

            if self.settings.login.random_email and not account.email:
                account = await self.account_reconciler.ensure_email(
                    account,
                    self.settings.login.random_email_user,
                    self.settings.login.random_email_host or self.settings.site.host,
                )

            await self._dispatch(
                LoginHookPoint.BEFORE_REDIRECT,
                payload,
                identity,
                account,
                created,
                redirect_to=request.redirect_to,
            )

            redirect_to = self.redirect_policy.resolve(account, request.redirect_to)

            logfire.info(
                "Telegram login completed",
                account_id=str(account.id),
                telegram_id=identity.id,
                created=created,
                new_session=session_token is not None,
            )

            return LoginResponse(
                account_id=str(account.id),
                login_name=account.login_name,
                redirect_to=redirect_to,
                created=created,
                session_token=session_token,
            )

    async def _dispatch(
        self,
        point: LoginHookPoint,
        payload: ExternalIdentity,
        identity: Optional[VerifiedIdentity] = None,
        account: Optional[LocalAccount] = None,
        created: bool = False,
        redirect_to: Optional[str] = None,
    ) -> None:
        await self.hooks.dispatch(
            LoginHookContext(
                point=point,
                payload=payload,
                identity=identity,
                account=account,
                created=created,
                redirect_to=redirect_to,
            )
        )
