"""Repository implementations."""

from .account import PostgresAccountRepository

__all__ = [
    "PostgresAccountRepository",
]
