"""Async engine and sessions for the account store."""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from tglogin.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the asyncpg engine from ``settings.database``."""
    db = settings.database
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        pool_pre_ping=True,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        pool_recycle=db.pool_recycle,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Sessions used per login request.

    Objects stay readable after commit since the callback builds its
    redirect from the account after the request transaction ends.
    """
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
