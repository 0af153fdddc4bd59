"""Download packaging for processed images."""

from dataclasses import dataclass
from datetime import UTC, datetime

from lumina_studio.domain.errors import NothingToDownload
from lumina_studio.domain.sessions import Session

DEFAULT_PREFIX = "lumina-edit"


@dataclass(frozen=True)
class DownloadFile:
    """File ready to be served as an attachment."""

    filename: str
    media_type: str
    data: bytes


def build_download(
    session: Session,
    prefix: str = DEFAULT_PREFIX,
    now: datetime | None = None,
) -> DownloadFile:
    """Package the processed image as ``<prefix>-<epoch-millis>.png``."""
    if session.processed is None:
        raise NothingToDownload("There is no processed image to download yet.")
    moment = now or datetime.now(tz=UTC)
    epoch_millis = int(moment.timestamp()) * 1000 + moment.microsecond // 1000
    return DownloadFile(
        filename=f"{prefix}-{epoch_millis}.png",
        media_type=session.processed.media_type,
        data=session.processed.data,
    )
