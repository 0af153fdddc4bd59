"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import FastAPI, File, Request, UploadFile, status
from fastapi.responses import JSONResponse, Response

from lumina_studio.api.schemas import PromptUpdate, ReplaceBody
from lumina_studio.app_logging import configure_logging
from lumina_studio.containers import AppContainer
from lumina_studio.domain.errors import (
    EmptyUpload,
    ErrorKind,
    HistoryEntryNotFound,
    NothingToDownload,
    SessionNotFound,
)
from lumina_studio.domain.images import EncodedImage
from lumina_studio.domain.results import DispatchResult, Dropped, Failure
from lumina_studio.domain.transforms import TransformMode, background_presets
from lumina_studio.services.downloads import build_download
from lumina_studio.services.rendering import SessionView, render_session
from lumina_studio.services.sessions import (
    ErrorDismissed,
    HistorySelected,
    PromptChanged,
    SessionReset,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(SessionNotFound)
    @app.exception_handler(HistoryEntryNotFound)
    async def not_found(request: Request, exc: LookupError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.exception_handler(NothingToDownload)
    async def nothing_to_download(
        request: Request, exc: NothingToDownload
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)}
        )

    @app.exception_handler(EmptyUpload)
    async def empty_upload(request: Request, exc: EmptyUpload) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/presets")
    async def presets() -> dict[str, object]:
        """List the background presets."""
        return {"presets": background_presets()}

    @app.post("/sessions", status_code=status.HTTP_201_CREATED)
    async def create_session(request: Request) -> dict[str, object]:
        """Start an empty editing session."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.create()
        return _view_payload(render_session(session))

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: UUID, request: Request) -> dict[str, object]:
        """Return the current session view."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.get(session_id)
        return _view_payload(render_session(session))

    @app.post("/sessions/{session_id}/image", response_model=None)
    async def upload_image(
        session_id: UUID,
        request: Request,
        files: list[UploadFile] = File(...),
    ) -> dict[str, object] | JSONResponse:
        """Upload the original photo; only the first file is used."""
        state_container: AppContainer = request.app.state.container
        upload = files[0]
        content_type = (upload.content_type or "").lower()
        if not content_type.startswith("image/"):
            return JSONResponse(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                content={"detail": "Only image files are accepted."},
            )
        if len(files) > 1:
            logger.info(
                "Ignoring %d extra uploaded files",
                len(files) - 1,
                extra={"session_id": str(session_id)},
            )
        session = await state_container.image_ingestor.ingest(session_id, upload)
        return _view_payload(render_session(session))

    @app.put("/sessions/{session_id}/prompt")
    async def update_prompt(
        session_id: UUID, body: PromptUpdate, request: Request
    ) -> dict[str, object]:
        """Store the background description."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.apply(
            session_id, PromptChanged(body.prompt)
        )
        return _view_payload(render_session(session))

    @app.post("/sessions/{session_id}/remove", response_model=None)
    async def remove_background(
        session_id: UUID, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Remove the background of the original photo."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.transform_dispatcher.dispatch(
            session_id, TransformMode.REMOVE
        )
        return _dispatch_response(state_container, session_id, result)

    @app.post("/sessions/{session_id}/replace", response_model=None)
    async def replace_background(
        session_id: UUID, request: Request, body: ReplaceBody | None = None
    ) -> dict[str, object] | JSONResponse:
        """Replace the background with a described scene."""
        state_container: AppContainer = request.app.state.container
        prompt = body.prompt if body else None
        session = state_container.session_store.get(session_id)
        if prompt is not None and session.can_dispatch:
            state_container.session_store.apply(session_id, PromptChanged(prompt))
        result = await state_container.transform_dispatcher.dispatch(
            session_id, TransformMode.REPLACE, prompt
        )
        return _dispatch_response(state_container, session_id, result)

    @app.post("/sessions/{session_id}/presets/{slug}", response_model=None)
    async def apply_preset(
        session_id: UUID, slug: str, request: Request
    ) -> dict[str, object] | JSONResponse:
        """Replace the background using a named preset."""
        state_container: AppContainer = request.app.state.container
        try:
            result = await state_container.transform_dispatcher.dispatch_preset(
                session_id, slug
            )
        except KeyError:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"detail": f"Unknown preset {slug!r}"},
            )
        return _dispatch_response(state_container, session_id, result)

    @app.post("/sessions/{session_id}/history/{entry_id}")
    async def select_history(
        session_id: UUID, entry_id: UUID, request: Request
    ) -> dict[str, object]:
        """Show a previous result without creating a new entry."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.apply(
            session_id, HistorySelected(entry_id)
        )
        return _view_payload(render_session(session))

    @app.delete("/sessions/{session_id}/error")
    async def dismiss_error(session_id: UUID, request: Request) -> dict[str, object]:
        """Dismiss the inline error message."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.apply(session_id, ErrorDismissed())
        return _view_payload(render_session(session))

    @app.post("/sessions/{session_id}/reset")
    async def reset_session(session_id: UUID, request: Request) -> dict[str, object]:
        """Start over with an empty session and history."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.apply(session_id, SessionReset())
        return _view_payload(render_session(session))

    @app.get("/sessions/{session_id}/download")
    async def download(session_id: UUID, request: Request) -> Response:
        """Return the processed image as an attachment."""
        state_container: AppContainer = request.app.state.container
        session = state_container.session_store.get(session_id)
        file = build_download(session, prefix=state_container.settings.download_prefix)
        return Response(
            content=file.data,
            media_type=file.media_type,
            headers={"Content-Disposition": f'attachment; filename="{file.filename}"'},
        )

    return app


def _dispatch_response(
    state_container: AppContainer, session_id: UUID, result: DispatchResult
) -> dict[str, object] | JSONResponse:
    """Map a dispatch result onto an HTTP response."""
    if isinstance(result, Dropped):
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": f"Dispatch ignored: {result.reason}"},
        )
    session = state_container.session_store.get(session_id)
    payload = _view_payload(render_session(session))
    if isinstance(result, Failure) and result.error.kind is ErrorKind.INVALID_REQUEST:
        return JSONResponse(status_code=422, content=payload)
    return payload


def _view_payload(view: SessionView) -> dict[str, object]:
    """Serialize a session view into JSON-friendly data."""
    return {
        "session_id": str(view.session_id),
        "mode": view.mode.value,
        "status": view.status.value,
        "prompt": view.prompt,
        "displayed": _image_url(view.displayed),
        "original": _image_url(view.original),
        "processed": _image_url(view.processed),
        "error": (
            {"kind": view.error.kind.value, "message": view.error.message}
            if view.error
            else None
        ),
        "history": [
            {
                "id": str(item.id),
                "created_at": item.created_at.isoformat(),
                "image": item.image.to_data_url(),
            }
            for item in view.history
        ],
        "can_dispatch": view.can_dispatch,
        "can_download": view.can_download,
    }


def _image_url(image: EncodedImage | None) -> str | None:
    return image.to_data_url() if image else None
