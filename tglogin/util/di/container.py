"""Dependency injection container."""

from dishka import AsyncContainer, Provider, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from tglogin.util.di import PROVIDERS, get_provider


def create_container(*extra: Provider) -> AsyncContainer:
    """Build the production container.

    Settings are loaded from environment variables when first requested.

    Args:
        extra: Additional providers, e.g. one that supplies a ``LoginHooks``
            registry with observers already registered

    Returns:
        Container with production providers and the FastAPI integration
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    return make_async_container(*providers, FastapiProvider(), *extra)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app for ``FromDishka`` injection."""
    setup_dishka(container, app)
