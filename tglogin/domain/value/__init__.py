"""Domain value objects for Telegram login."""

from tglogin.domain.value.identifiers import AccountId, TelegramUserId
from tglogin.domain.value.types import (
    AUTH_FIELDS,
    MAX_LOGIN_NAME_LENGTH,
    TELEGRAM_USER_ID_META_KEY,
    TELEGRAM_USERNAME_META_KEY,
    DecisionAction,
    LoginHookPoint,
)

__all__ = [
    # Identifiers
    "AccountId",
    "TelegramUserId",
    # Types
    "AUTH_FIELDS",
    "MAX_LOGIN_NAME_LENGTH",
    "TELEGRAM_USER_ID_META_KEY",
    "TELEGRAM_USERNAME_META_KEY",
    "DecisionAction",
    "LoginHookPoint",
]
