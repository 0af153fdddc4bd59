"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from lumina_studio.adapters.memory_session_repository import (
    InMemorySessionRepository,
)
from lumina_studio.adapters.openai_image_client import OpenAIImageClient
from lumina_studio.config import Settings
from lumina_studio.services.dispatch import TransformDispatcher
from lumina_studio.services.ingest import ImageIngestor
from lumina_studio.services.sessions import SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    session_store: SessionStore
    image_ingestor: ImageIngestor
    transform_dispatcher: TransformDispatcher
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    session_store = SessionStore(InMemorySessionRepository())
    image_client = OpenAIImageClient.create(
        api_key=resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
        image_model=resolved_settings.openai_image_model,
    )
    transform_dispatcher = TransformDispatcher(
        store=session_store,
        client=image_client,
        model=resolved_settings.openai_model,
        debug_errors=resolved_settings.debug_errors,
    )

    async def close_resources() -> None:
        await image_client.close()

    return AppContainer(
        settings=resolved_settings,
        session_store=session_store,
        image_ingestor=ImageIngestor(session_store),
        transform_dispatcher=transform_dispatcher,
        close_resources=close_resources,
    )
