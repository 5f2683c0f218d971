"""Local account entity.

Accounts are owned by the account store. Login code reads them and asks the
store for mutations; it never edits an account in place.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from tglogin.domain.model.common import DomainModel
from tglogin.domain.value import (
    TELEGRAM_USER_ID_META_KEY,
    TELEGRAM_USERNAME_META_KEY,
    AccountId,
    TelegramUserId,
)


class LocalAccount(DomainModel):
    """Account record as seen by the login flow."""

    id: AccountId
    login_name: str
    email: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    roles: list[str] = Field(default_factory=list)
    # Tenants (sites) the account belongs to in multi-tenant deployments
    tenant_ids: list[str] = Field(default_factory=list)
    is_super_admin: bool = False
    metadata: dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def external_id(self) -> TelegramUserId | None:
        """Telegram user id linked to this account, if any."""
        value = self.metadata.get(TELEGRAM_USER_ID_META_KEY)
        return TelegramUserId(int(value)) if value else None

    @property
    def external_username(self) -> str | None:
        """Telegram username recorded at the last login, if any."""
        return self.metadata.get(TELEGRAM_USERNAME_META_KEY)


class NewAccount(DomainModel):
    """Fields for an account the store should create.

    ``external_id`` is written together with the account so the store can
    enforce one account per Telegram user atomically.
    """

    login_name: str
    password: str
    first_name: str
    last_name: str = ""
    role: str
    external_id: TelegramUserId


class AccountUpdate(DomainModel):
    """Partial update of an account. ``None`` leaves a field untouched."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
