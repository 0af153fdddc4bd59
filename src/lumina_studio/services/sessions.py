"""Session state machine for background editing.

Every change to a session goes through ``reduce``, a pure function from a
snapshot and an action to the next snapshot. ``SessionStore.apply`` never
suspends, so under asyncio a guard check and the transition it protects
always happen together.
"""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID, uuid4

from lumina_studio.domain.errors import ErrorDescriptor, SessionNotFound
from lumina_studio.domain.history import HistoryEntry, HistoryLedger
from lumina_studio.domain.images import EncodedImage
from lumina_studio.domain.sessions import Session, SessionStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ImageIngested:
    image: EncodedImage


@dataclass(frozen=True)
class PromptChanged:
    text: str


@dataclass(frozen=True)
class TransformStarted:
    attempt_id: UUID


@dataclass(frozen=True)
class TransformRejected:
    """Request was invalid; no external call was made."""

    error: ErrorDescriptor


@dataclass(frozen=True)
class TransformSucceeded:
    attempt_id: UUID
    entry: HistoryEntry


@dataclass(frozen=True)
class TransformFailed:
    attempt_id: UUID
    error: ErrorDescriptor


@dataclass(frozen=True)
class HistorySelected:
    entry_id: UUID


@dataclass(frozen=True)
class ErrorDismissed:
    pass


@dataclass(frozen=True)
class SessionReset:
    pass


SessionAction = (
    ImageIngested
    | PromptChanged
    | TransformStarted
    | TransformRejected
    | TransformSucceeded
    | TransformFailed
    | HistorySelected
    | ErrorDismissed
    | SessionReset
)


def reduce(session: Session, action: SessionAction) -> Session:  # noqa: PLR0911
    """Return the snapshot that follows applying an action.

    Actions that are not allowed in the current state return the input
    snapshot unchanged. Reset and a new upload abandon the current attempt
    but keep ``in_flight`` set, so no second call starts until the
    abandoned one settles.
    """
    if isinstance(action, ImageIngested):
        return replace(
            session,
            original=action.image,
            processed=None,
            error=None,
            status=SessionStatus.IDLE,
            attempt_id=None,
        )
    if isinstance(action, PromptChanged):
        return replace(session, prompt=action.text)
    if isinstance(action, TransformStarted):
        if not session.can_dispatch:
            return session
        return replace(
            session,
            status=SessionStatus.PROCESSING,
            error=None,
            attempt_id=action.attempt_id,
            in_flight=action.attempt_id,
        )
    if isinstance(action, TransformRejected):
        if session.is_busy:
            return session
        return replace(session, error=action.error)
    if isinstance(action, TransformSucceeded):
        if not _owns_attempt(session, action.attempt_id):
            return _settle(session, action.attempt_id)
        return replace(
            session,
            processed=action.entry.image,
            history=session.history.append(action.entry),
            status=SessionStatus.SUCCEEDED,
            error=None,
            attempt_id=None,
            in_flight=None,
        )
    if isinstance(action, TransformFailed):
        if not _owns_attempt(session, action.attempt_id):
            return _settle(session, action.attempt_id)
        return replace(
            session,
            status=SessionStatus.FAILED,
            error=action.error,
            attempt_id=None,
            in_flight=None,
        )
    if isinstance(action, HistorySelected):
        entry = session.history.find(action.entry_id)
        return replace(session, processed=entry.image)
    if isinstance(action, ErrorDismissed):
        return replace(session, error=None)
    if isinstance(action, SessionReset):
        return Session(
            id=session.id, history=HistoryLedger(), in_flight=session.in_flight
        )
    raise TypeError(f"Unsupported session action: {type(action).__name__}")


def _owns_attempt(session: Session, attempt_id: UUID) -> bool:
    return session.is_processing and session.attempt_id == attempt_id


def _settle(session: Session, attempt_id: UUID) -> Session:
    """Release the call marker of an abandoned attempt, keeping everything else."""
    if session.in_flight != attempt_id:
        return session
    return replace(session, in_flight=None)


class SessionRepository(Protocol):
    """Storage interface for session snapshots."""

    def get(self, session_id: UUID) -> Session | None:
        """Return the latest snapshot for a session, if present."""

    def save(self, session: Session) -> None:
        """Store a snapshot, replacing any previous one."""


@dataclass
class SessionStore:
    """Holds session snapshots and applies transitions to them."""

    repository: SessionRepository

    def create(self) -> Session:
        """Create an empty session and return it."""
        session = Session(id=uuid4())
        self.repository.save(session)
        logger.info("Session created", extra={"session_id": str(session.id)})
        return session

    def get(self, session_id: UUID) -> Session:
        """Return the current snapshot for a session."""
        session = self.repository.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def apply(self, session_id: UUID, action: SessionAction) -> Session:
        """Apply an action to a session and store the resulting snapshot."""
        current = self.get(session_id)
        updated = reduce(current, action)
        if updated is current:
            logger.info(
                "Ignored %s in status %s",
                type(action).__name__,
                current.status.value,
                extra={"session_id": str(session_id)},
            )
            return current
        self.repository.save(updated)
        if updated.status is not current.status:
            logger.info(
                "Session status %s -> %s",
                current.status.value,
                updated.status.value,
                extra={"session_id": str(session_id)},
            )
        return updated
