"""Signed session tokens stored in the login cookie."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel, Field

from tglogin.config import AuthSettings


class SessionClaims(BaseModel):
    """Claims carried by a session token."""

    account_id: str = Field(alias="sub")
    login_name: str = Field(alias="name")
    issued_at: datetime = Field(alias="iat")
    expires_at: datetime = Field(alias="exp")


class SessionTokenError(Exception):
    """Session token could not be accepted."""


def create_token(account_id: str, login_name: str, settings: AuthSettings) -> str:
    """Sign a session token for an account.

    Args:
        account_id: Local account ID, stored as ``sub``
        login_name: Account login name
        settings: Authentication settings

    Returns:
        Encoded token
    """
    now = datetime.now(timezone.utc)
    claims = {
        "sub": account_id,
        "name": login_name,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expiry_days),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> SessionClaims:
    """Check the signature and expiry of a session token.

    Raises:
        SessionTokenError: Token is expired, tampered with or malformed
    """
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise SessionTokenError("Session has expired")
    except jwt.InvalidTokenError as e:
        raise SessionTokenError(f"Invalid session token: {e}")
    return SessionClaims.model_validate(claims)
