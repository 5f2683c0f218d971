"""Mock persistence providers for testing."""

from dishka import Scope, provide

from tglogin.domain.repository import AccountRepository
from tglogin.persistence.repository.inmemory import InMemoryAccountRepository
from tglogin.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using an in-memory account store.

    The store lives as long as the container, so every request scope opened
    on one container sees the same accounts. Each test builds its own
    container.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_account_repository(self) -> AccountRepository:
        """Provide in-memory account repository."""
        return InMemoryAccountRepository()
