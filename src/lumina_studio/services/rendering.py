"""Read-only projections of a session for display."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from lumina_studio.domain.errors import ErrorDescriptor
from lumina_studio.domain.images import EncodedImage
from lumina_studio.domain.sessions import Session, SessionStatus


class ViewMode(str, Enum):
    """What the editor area should show."""

    AWAITING_UPLOAD = "awaiting-upload"
    HAVE_IMAGE = "have-image-idle-or-done"
    PROCESSING_OVERLAY = "processing-overlay"


@dataclass(frozen=True)
class HistoryItemView:
    id: UUID
    created_at: datetime
    image: EncodedImage


@dataclass(frozen=True)
class SessionView:
    """Everything a client needs to draw the editor."""

    session_id: UUID
    mode: ViewMode
    status: SessionStatus
    prompt: str
    displayed: EncodedImage | None
    original: EncodedImage | None
    processed: EncodedImage | None
    error: ErrorDescriptor | None
    history: list[HistoryItemView]
    can_dispatch: bool
    can_download: bool


def view_mode(session: Session) -> ViewMode:
    """Pick the editor mode from status and image presence."""
    if session.original is None:
        return ViewMode.AWAITING_UPLOAD
    if session.is_processing:
        return ViewMode.PROCESSING_OVERLAY
    return ViewMode.HAVE_IMAGE


def render_session(session: Session) -> SessionView:
    """Build the display view of a session."""
    return SessionView(
        session_id=session.id,
        mode=view_mode(session),
        status=session.status,
        prompt=session.prompt,
        displayed=session.processed or session.original,
        original=session.original,
        processed=session.processed,
        error=session.error,
        history=[
            HistoryItemView(id=entry.id, created_at=entry.created_at, image=entry.image)
            for entry in session.history
        ],
        can_dispatch=session.can_dispatch,
        can_download=session.processed is not None and not session.is_processing,
    )
