"""Shared test fixtures."""

import asyncio
import base64
from dataclasses import dataclass, field

import pytest

from lumina_studio.adapters.memory_session_repository import (
    InMemorySessionRepository,
)
from lumina_studio.config import Settings
from lumina_studio.containers import AppContainer
from lumina_studio.domain.generation import (
    Candidate,
    Content,
    ContentPart,
    GenerationRequest,
    GenerationResponse,
    InlineImage,
)
from lumina_studio.services.dispatch import ImageGenerationClient, TransformDispatcher
from lumina_studio.services.ingest import ImageIngestor
from lumina_studio.services.sessions import SessionStore

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"original-photo"
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"edited-photo"


def image_response(*payloads: bytes, text: str | None = None) -> GenerationResponse:
    """Build a one-candidate response with optional text and image parts."""
    parts: list[ContentPart] = []
    if text is not None:
        parts.append(ContentPart(text=text))
    for payload in payloads:
        parts.append(
            ContentPart(
                inline_image=InlineImage(
                    data=base64.b64encode(payload).decode("utf-8"),
                    media_type="image/png",
                )
            )
        )
    return GenerationResponse(candidates=[Candidate(content=Content(parts=parts))])


@dataclass
class FakeUpload:
    """Stand-in for an uploaded file."""

    data: bytes = JPEG_BYTES
    content_type: str | None = "image/jpeg"
    filename: str | None = "photo.jpg"

    async def read(self) -> bytes:
        return self.data


@dataclass
class FakeImageClient(ImageGenerationClient):
    """Fake generation client that records requests."""

    responses: list[GenerationResponse | Exception] = field(default_factory=list)
    requests: list[GenerationRequest] = field(default_factory=list)
    gate: asyncio.Event | None = None

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        self.requests.append(request)
        if self.gate is not None:
            await self.gate.wait()
        outcome = self.responses.pop(0) if self.responses else image_response(PNG_BYTES)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="openai-key", environment="test")


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore(InMemorySessionRepository())


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def dispatcher(
    session_store: SessionStore, image_client: FakeImageClient
) -> TransformDispatcher:
    return TransformDispatcher(
        store=session_store, client=image_client, model="test-model"
    )


@pytest.fixture
def container(
    settings: Settings,
    session_store: SessionStore,
    dispatcher: TransformDispatcher,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        session_store=session_store,
        image_ingestor=ImageIngestor(session_store),
        transform_dispatcher=dispatcher,
        close_resources=close_resources,
    )
