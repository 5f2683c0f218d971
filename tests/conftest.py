"""Test configuration and fixtures."""

import hashlib
import hmac
import time
from uuid import uuid4

import logfire
import pytest

from tglogin.domain.model import LocalAccount
from tglogin.domain.value import TELEGRAM_USER_ID_META_KEY, AccountId

# Keep telemetry local during tests
logfire.configure(send_to_logfire=False, console=False)

BOT_TOKEN = "123456:TEST-bot-token"
JWT_SECRET = "test-secret"
HOME_URL = "https://example.com/"


@pytest.fixture(autouse=True)
def login_env(monkeypatch):
    """Settings shared by every test, read by ``Settings()`` in the container."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOGIN__BOT_TOKEN", BOT_TOKEN)
    monkeypatch.setenv("AUTH__JWT_SECRET", JWT_SECRET)
    monkeypatch.setenv("SITE__HOME_URL", HOME_URL)
    monkeypatch.setenv("SITE__ADMIN_URL", f"{HOME_URL}wp-admin/")
    monkeypatch.setenv("SITE__PROFILE_URL", f"{HOME_URL}wp-admin/profile.php")
    monkeypatch.setenv("SITE__USER_ADMIN_URL", f"{HOME_URL}wp-admin/user/")


def sign(fields: dict[str, str], bot_token: str = BOT_TOKEN) -> str:
    """Sign a payload the way the Telegram Login Widget does."""
    data_check_string = "\n".join(sorted(f"{k}={v}" for k, v in fields.items()))
    secret_key = hashlib.sha256(bot_token.encode()).digest()
    return hmac.new(
        secret_key, data_check_string.encode(), hashlib.sha256
    ).hexdigest()


def make_payload(
    telegram_id: int = 424242,
    first_name: str = "Alice",
    auth_date: int | str | None = None,
    bot_token: str = BOT_TOKEN,
    **extra: str,
) -> dict[str, str]:
    """Build a signed Login Widget payload."""
    fields = {
        "id": str(telegram_id),
        "first_name": first_name,
        "auth_date": str(auth_date if auth_date is not None else int(time.time())),
        **extra,
    }
    fields["hash"] = sign(fields, bot_token)
    return fields


def make_account(
    login_name: str = "existing",
    telegram_id: int | None = None,
    roles: list[str] | None = None,
    **kwargs,
) -> LocalAccount:
    """Build an account, optionally linked to a Telegram user."""
    metadata = {}
    if telegram_id is not None:
        metadata[TELEGRAM_USER_ID_META_KEY] = str(telegram_id)
    return LocalAccount(
        id=AccountId(uuid4()),
        login_name=login_name,
        roles=roles if roles is not None else ["subscriber"],
        metadata=metadata,
        **kwargs,
    )
