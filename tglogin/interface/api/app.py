"""FastAPI application."""

from dishka import AsyncContainer
from fastapi import FastAPI

from tglogin.config import AuthSettings, Settings
from tglogin.interface.api.routes import health, login
from tglogin.util.di.container import create_container, setup_di
from tglogin.util.error import ConfigurationError
from tglogin.util.observability import instrument_fastapi


def check_production_settings(settings: Settings) -> None:
    """Refuse to serve production traffic with unsafe settings.

    Raises:
        ConfigurationError: If the session secret is the default one
    """
    if settings.environment != "production":
        return
    if settings.auth.jwt_secret == AuthSettings().jwt_secret:
        raise ConfigurationError(
            "AUTH__JWT_SECRET", "the default secret cannot sign production sessions"
        )


def create_app(
    settings: Settings | None = None, container: AsyncContainer | None = None
) -> FastAPI:
    """Create FastAPI application.

    Logfire should be configured before calling this function. In production,
    start_app.py handles this.

    Args:
        settings: Settings to check (loaded from the environment if omitted)
        container: DI container (production container if omitted)
    """
    settings = settings or Settings()
    check_production_settings(settings)

    app_instance = FastAPI(
        title="Telegram Login",
        description="Telegram Login Widget callback verification and account linking",
        version="0.1.0",
    )

    instrument_fastapi(app_instance)

    setup_di(app_instance, container or create_container())

    app_instance.include_router(health.router)
    app_instance.include_router(login.router)

    return app_instance
