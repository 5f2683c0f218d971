"""Random credentials for accounts created through Telegram login."""

import secrets

from argon2 import PasswordHasher

_PASSWORD_HASHER = PasswordHasher()


def generate_password(length: int = 24) -> str:
    """Generate a random password the user never sees."""
    return secrets.token_urlsafe(length)


def hash_password(password: str) -> str:
    """Hash a password for storage."""
    return _PASSWORD_HASHER.hash(password)
