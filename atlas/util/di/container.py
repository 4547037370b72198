"""Dependency injection container."""

from collections.abc import Collection

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI
import logfire

from atlas.util.di import PROVIDERS, Component, get_provider


def mockable_components() -> set[Component]:
    """Names of the infrastructure components that ship a mock."""
    return {
        base.__mock_component__
        for base in PROVIDERS
        if base.__subclasses__() and base.__mock_component__ is not None
    }


def build_container(mocked: Collection[Component] = ()) -> AsyncContainer:
    """Build a container, swapping in mocks for the named components.

    Args:
        mocked: Components to replace with their mock providers

    Returns:
        Container that also backs the FastAPI and WebSocket integration

    Raises:
        ValueError: If a named component has no mock
    """
    unknown = set(mocked) - mockable_components()
    if unknown:
        raise ValueError(f"Unknown components: {unknown}")

    provider_instances = [
        get_provider(base, use_mock=base.__mock_component__ in mocked)()
        for base in PROVIDERS
    ]
    return make_async_container(*provider_instances, FastapiProvider())


def create_container() -> AsyncContainer:
    """Build the production container.

    Settings are loaded from environment variables when first resolved.
    """
    return build_container()


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach the container to the app.

    Routes resolve dependencies through ``FromDishka``; the live map
    WebSocket reads ``app.state.dishka_container`` directly.
    """
    setup_dishka(container, app)
    logfire.debug("DI container attached", routes=len(app.routes))
