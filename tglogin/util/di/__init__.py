"""Dependency injection module."""

from typing import Type

from tglogin.util.di.application import ProdApplicationProvider
from tglogin.util.di.base import Component, ProviderBase
from tglogin.util.di.core import ProdConfigProvider
from tglogin.util.di.domain import ProdDomainProvider
from tglogin.util.di.infrastructure import (
    PersistenceProvider,
    ProdPersistenceProvider,
)
from tglogin.util.error import DependencyInjectionError

PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Infrastructure components (mockable)
    PersistenceProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Get appropriate provider class.

    Concrete providers are returned as-is. For a mockable component the
    subclass whose ``__is_mock__`` equals ``use_mock`` is returned.

    Args:
        base: Provider base class
        use_mock: Whether to use mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        DependencyInjectionError: If requested implementation not found
    """
    if not base.is_mockable():
        return base

    impl = next(
        (c for c in base.__subclasses__() if c.__is_mock__ == use_mock),
        None,
    )

    if not impl:
        raise DependencyInjectionError(
            base.__mock_component__ or base.__name__, use_mock
        )

    return impl


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "PersistenceProvider",
    "ProdPersistenceProvider",
]
