"""Domain value types for Telegram login."""

from enum import Enum

# Query parameters the Telegram Login Widget signs. Anything else in the
# request is dropped before verification.
AUTH_FIELDS: frozenset[str] = frozenset(
    {"id", "first_name", "last_name", "username", "photo_url", "auth_date", "hash"}
)

# Account metadata keys written for every Telegram login
TELEGRAM_USER_ID_META_KEY = "tglogin_telegram_user_id"
TELEGRAM_USERNAME_META_KEY = "tglogin_telegram_username"

# Width of the login name column
MAX_LOGIN_NAME_LENGTH = 60


class DecisionAction(str, Enum):
    """What the reconciler must do with a verified identity."""

    ATTACH_TO_EXISTING_EXTERNAL_USER = "attach_to_existing_external_user"
    CREATE_NEW_ACCOUNT = "create_new_account"
    REJECT_SIGNUP_DISABLED = "reject_signup_disabled"


class LoginHookPoint(str, Enum):
    """Named extension points of the login sequence, in execution order."""

    BEFORE_VERIFY = "before_verify"
    PRE_SAVE = "pre_save"
    AFTER_SAVE = "after_save"
    BEFORE_LOGIN = "before_login"
    AFTER_LOGIN = "after_login"
    BEFORE_REDIRECT = "before_redirect"
