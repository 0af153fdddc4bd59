"""Domain models for encoded images."""

import base64
from dataclasses import dataclass


@dataclass(frozen=True)
class EncodedImage:
    """Image payload tagged with its media type."""

    data: bytes
    media_type: str

    @classmethod
    def from_base64(cls, data: str, media_type: str) -> "EncodedImage":
        """Decode a base64 payload into an image."""
        return cls(data=base64.b64decode(data), media_type=media_type)

    def to_base64(self) -> str:
        """Return the payload as a base64 string."""
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self) -> str:
        """Return the image as a base64 data URL."""
        return f"data:{self.media_type};base64,{self.to_base64()}"


def detect_media_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
