"""Session domain service."""

from typing import Optional
from uuid import UUID

import logfire
from pydantic import ValidationError

from tglogin.config import AuthSettings
from tglogin.domain.model.account import LocalAccount
from tglogin.domain.repository.account import AccountRepository
from tglogin.domain.value import AccountId
from tglogin.util.jwt import SessionTokenError, create_token, verify_token


class SessionService:
    """Looks up and issues login sessions backed by signed JWT cookies."""

    def __init__(
        self, account_repository: AccountRepository, auth_settings: AuthSettings
    ) -> None:
        """Initialize session service.

        Args:
            account_repository: Account repository
            auth_settings: Authentication settings
        """
        self.account_repository = account_repository
        self.auth_settings = auth_settings

    async def find_session_account(
        self, token: Optional[str]
    ) -> Optional[LocalAccount]:
        """Resolve the account of the current session.

        A missing, invalid or expired token, or a token for an account that no
        longer exists, means there is no session.

        Args:
            token: Session token from the request cookie

        Returns:
            Logged-in account, or None
        """
        if not token:
            return None

        with logfire.span("session_service.find_session_account"):
            try:
                payload = verify_token(token, self.auth_settings)
                account_id = AccountId(UUID(payload.account_id))
            except (SessionTokenError, ValidationError, ValueError) as e:
                logfire.debug(
                    "Session token rejected, treating as unauthenticated", error=str(e)
                )
                return None

            account = await self.account_repository.find_by_id(account_id)
            if account is None:
                logfire.warn("Session account not found", account_id=str(account_id))
            return account

    def establish_session(self, account: LocalAccount) -> str:
        """Issue a session token for an account.

        Args:
            account: Account to log in

        Returns:
            Session token to store in the cookie
        """
        with logfire.span(
            "session_service.establish_session", account_id=str(account.id)
        ):
            token = create_token(
                str(account.id), account.login_name, self.auth_settings
            )
            logfire.info(
                "Session established",
                account_id=str(account.id),
                login_name=account.login_name,
            )
            return token
