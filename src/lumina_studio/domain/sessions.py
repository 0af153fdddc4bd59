"""Domain models for editing sessions."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from lumina_studio.domain.errors import ErrorDescriptor
from lumina_studio.domain.history import HistoryLedger
from lumina_studio.domain.images import EncodedImage


class SessionStatus(str, Enum):
    """Lifecycle status of the transform state machine."""

    IDLE = "idle"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of one editing session."""

    id: UUID
    original: EncodedImage | None = None
    processed: EncodedImage | None = None
    prompt: str = ""
    status: SessionStatus = SessionStatus.IDLE
    error: ErrorDescriptor | None = None
    history: HistoryLedger = field(default_factory=HistoryLedger)
    attempt_id: UUID | None = None
    # Outstanding external call; survives reset and re-upload until it settles.
    in_flight: UUID | None = None

    @property
    def is_processing(self) -> bool:
        return self.status is SessionStatus.PROCESSING

    @property
    def is_busy(self) -> bool:
        return self.in_flight is not None or self.is_processing

    @property
    def can_dispatch(self) -> bool:
        """Return true when a new transform may start."""
        return self.original is not None and not self.is_busy
