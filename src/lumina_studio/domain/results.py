"""Result types returned by transform dispatch."""

from dataclasses import dataclass

from lumina_studio.domain.errors import ErrorDescriptor
from lumina_studio.domain.images import EncodedImage


@dataclass(frozen=True)
class Success:
    """Dispatch produced an image."""

    image: EncodedImage


@dataclass(frozen=True)
class Failure:
    """Dispatch failed; the error is also recorded on the session."""

    error: ErrorDescriptor


@dataclass(frozen=True)
class Dropped:
    """Dispatch was not accepted and left the session untouched."""

    reason: str


DispatchResult = Success | Failure | Dropped
