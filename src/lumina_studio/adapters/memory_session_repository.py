"""In-process session repository."""

from dataclasses import dataclass
from uuid import UUID

from lumina_studio.domain.sessions import Session
from lumina_studio.services.sessions import SessionRepository


@dataclass
class InMemorySessionRepository(SessionRepository):
    """Keeps session snapshots for the lifetime of the process."""

    _sessions: dict[UUID, Session]

    def __init__(self) -> None:
        self._sessions = {}

    def get(self, session_id: UUID) -> Session | None:
        """Return the stored snapshot for a session, if present."""
        return self._sessions.get(session_id)

    def save(self, session: Session) -> None:
        """Replace the stored snapshot for a session."""
        self._sessions[session.id] = session

    def __len__(self) -> int:
        return len(self._sessions)
