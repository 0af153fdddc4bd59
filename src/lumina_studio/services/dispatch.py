"""Single-flight dispatch of transform requests to the generation service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from lumina_studio.domain.errors import (
    GENERIC_FAILURE_MESSAGE,
    NO_IMAGE_MESSAGE,
    ErrorDescriptor,
    ErrorKind,
    InvalidRequestError,
)
from lumina_studio.domain.generation import (
    Content,
    ContentPart,
    GenerationRequest,
    GenerationResponse,
    InlineImage,
)
from lumina_studio.domain.history import HistoryEntry
from lumina_studio.domain.images import EncodedImage
from lumina_studio.domain.results import DispatchResult, Dropped, Failure, Success
from lumina_studio.domain.transforms import TransformMode, TransformRequest, find_preset
from lumina_studio.services.sessions import (
    PromptChanged,
    SessionStore,
    TransformFailed,
    TransformRejected,
    TransformStarted,
    TransformSucceeded,
)
from lumina_studio.services.transforms import build_transform_request

logger = logging.getLogger(__name__)


class ImageGenerationClient(Protocol):
    """Interface for the external image-generation service."""

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Submit a request and return the raw response."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class TransformDispatcher:
    """Owns the one outstanding generation call of each session."""

    store: SessionStore
    client: ImageGenerationClient
    model: str
    debug_errors: bool = False
    clock: Callable[[], datetime] = field(default=_utcnow)

    async def dispatch(
        self,
        session_id: UUID,
        mode: TransformMode,
        prompt_text: str | None = None,
    ) -> DispatchResult:
        """Run one transform attempt and record its outcome on the session.

        ``prompt_text`` overrides the session prompt for replace mode. Errors
        never propagate: they are returned as ``Failure`` and stored on the
        session. Attempts made while another is in flight, or before an
        image was uploaded, are dropped.
        """
        session = self.store.get(session_id)
        if not session.can_dispatch:
            reason = "processing" if session.is_busy else "no image uploaded"
            logger.info(
                "Dropped %s dispatch: %s",
                mode.value,
                reason,
                extra={"session_id": str(session_id)},
            )
            return Dropped(reason)

        try:
            request = build_transform_request(
                mode, session.prompt if prompt_text is None else prompt_text
            )
        except InvalidRequestError as exc:
            error = ErrorDescriptor(kind=ErrorKind.INVALID_REQUEST, message=str(exc))
            self.store.apply(session_id, TransformRejected(error))
            return Failure(error)

        attempt_id = uuid4()
        started = self.store.apply(session_id, TransformStarted(attempt_id))
        if started.attempt_id != attempt_id or started.original is None:
            return Dropped("processing")

        result: Success | Failure = Failure(
            ErrorDescriptor(
                kind=ErrorKind.TRANSPORT_OR_SERVICE, message=GENERIC_FAILURE_MESSAGE
            )
        )
        try:
            response = await self.client.generate(
                _generation_request(self.model, started.original, request)
            )
            result = _result_from_response(response)
        except Exception as exc:
            logger.exception(
                "Image generation failed", extra={"session_id": str(session_id)}
            )
            result = Failure(
                ErrorDescriptor(
                    kind=ErrorKind.TRANSPORT_OR_SERVICE,
                    message=self._describe(exc),
                )
            )
        finally:
            self._complete(session_id, attempt_id, result)
        return result

    async def dispatch_preset(self, session_id: UUID, slug: str) -> DispatchResult:
        """Set the session prompt to a preset and dispatch a replace."""
        preset = find_preset(slug)
        session = self.store.get(session_id)
        if not session.can_dispatch:
            return Dropped(
                "processing" if session.is_busy else "no image uploaded"
            )
        self.store.apply(session_id, PromptChanged(preset.prompt))
        return await self.dispatch(session_id, TransformMode.REPLACE, preset.prompt)

    def _complete(
        self, session_id: UUID, attempt_id: UUID, result: Success | Failure
    ) -> None:
        if isinstance(result, Success):
            entry = HistoryEntry(
                id=uuid4(), image=result.image, created_at=self.clock()
            )
            self.store.apply(session_id, TransformSucceeded(attempt_id, entry))
        else:
            self.store.apply(session_id, TransformFailed(attempt_id, result.error))

    def _describe(self, exc: Exception) -> str:
        message = str(exc).strip() or GENERIC_FAILURE_MESSAGE
        if self.debug_errors:
            return f"{message} (debug: {type(exc).__name__})"
        return message


def _generation_request(
    model: str, original: EncodedImage, request: TransformRequest
) -> GenerationRequest:
    return GenerationRequest(
        model=model,
        content=Content(
            parts=[
                ContentPart(inline_image=InlineImage.from_image(original)),
                ContentPart(text=request.instruction),
            ]
        ),
    )


def _result_from_response(response: GenerationResponse) -> Success | Failure:
    """Take the first image part of the response as the result."""
    inline = response.first_image()
    if inline is None:
        return Failure(
            ErrorDescriptor(kind=ErrorKind.EMPTY_RESULT, message=NO_IMAGE_MESSAGE)
        )
    return Success(inline.decode())
