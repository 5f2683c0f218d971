"""Repository interfaces.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the infrastructure layer.
"""

from tglogin.domain.repository.account import AccountRepository

__all__ = [
    "AccountRepository",
]
