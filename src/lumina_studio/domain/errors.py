"""Error taxonomy for editing sessions."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

NO_IMAGE_MESSAGE = "No image was generated. Please try again."
GENERIC_FAILURE_MESSAGE = "An error occurred during processing."


class ErrorKind(str, Enum):
    """Kinds of failure a dispatch attempt can report."""

    INVALID_REQUEST = "invalid_request"
    TRANSPORT_OR_SERVICE = "transport_or_service"
    EMPTY_RESULT = "empty_result"


@dataclass(frozen=True)
class ErrorDescriptor:
    """User-facing description of a failed attempt."""

    kind: ErrorKind
    message: str


class InvalidRequestError(ValueError):
    """Raised when a transform request cannot be built."""


class SessionNotFound(LookupError):
    """Raised when a session id is unknown."""

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class HistoryEntryNotFound(LookupError):
    """Raised when a history entry id is not in the ledger."""

    def __init__(self, entry_id: UUID) -> None:
        super().__init__(f"History entry {entry_id} not found")
        self.entry_id = entry_id


class NothingToDownload(RuntimeError):
    """Raised when a download is requested before any result exists."""


class EmptyUpload(ValueError):
    """Raised when an uploaded file carries no bytes."""
