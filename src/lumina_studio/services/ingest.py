"""Turns uploaded files into encoded images on the session."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from lumina_studio.domain.errors import EmptyUpload
from lumina_studio.domain.images import EncodedImage, detect_media_type
from lumina_studio.domain.sessions import Session
from lumina_studio.services.sessions import ImageIngested, SessionStore

logger = logging.getLogger(__name__)


class RawImageFile(Protocol):
    """Uploaded file as handed over by the transport layer."""

    filename: str | None

    @property
    def content_type(self) -> str | None:
        """Return the declared media type, if any."""

    async def read(self) -> bytes:
        """Return the file contents."""


@dataclass
class ImageIngestor:
    """Loads an uploaded image and makes it the session's original."""

    store: SessionStore

    async def ingest(self, session_id: UUID, upload: RawImageFile) -> Session:
        """Read the upload and reset derived session state in one step."""
        self.store.get(session_id)
        image = await decode_upload(upload)
        logger.info(
            "Ingested %s (%d bytes)",
            image.media_type,
            len(image.data),
            extra={"session_id": str(session_id), "upload_filename": upload.filename},
        )
        return self.store.apply(session_id, ImageIngested(image))


async def decode_upload(upload: RawImageFile) -> EncodedImage:
    """Read an upload into an encoded image."""
    data = await upload.read()
    if not data:
        raise EmptyUpload(f"Uploaded file {upload.filename or ''!r} is empty")
    return EncodedImage(data=data, media_type=_resolve_media_type(upload, data))


def _resolve_media_type(upload: RawImageFile, data: bytes) -> str:
    declared = (upload.content_type or "").split(";")[0].strip().lower()
    if declared.startswith("image/") and declared != "image/*":
        return declared
    return detect_media_type(data)
