"""Models for image-generation requests and responses."""

from pydantic import BaseModel, Field

from lumina_studio.domain.images import EncodedImage


class InlineImage(BaseModel):
    """Base64 image payload embedded in a content part."""

    data: str
    media_type: str = "image/png"

    @classmethod
    def from_image(cls, image: EncodedImage) -> "InlineImage":
        """Build an inline payload from an encoded image."""
        return cls(data=image.to_base64(), media_type=image.media_type)

    def decode(self) -> EncodedImage:
        """Decode the payload into an encoded image."""
        return EncodedImage.from_base64(self.data, self.media_type)


class ContentPart(BaseModel):
    """Single content part carrying either an image or text."""

    inline_image: InlineImage | None = None
    text: str | None = None


class Content(BaseModel):
    """Ordered list of content parts."""

    parts: list[ContentPart] = Field(default_factory=list)


class GenerationRequest(BaseModel):
    """Request sent to the image-generation service."""

    model: str
    content: Content


class Candidate(BaseModel):
    """Single response candidate."""

    content: Content = Field(default_factory=Content)


class GenerationResponse(BaseModel):
    """Response returned by the image-generation service."""

    candidates: list[Candidate] = Field(default_factory=list)

    def first_image(self) -> InlineImage | None:
        """Return the first inline image of the first candidate, if any."""
        if not self.candidates:
            return None
        for part in self.candidates[0].content.parts:
            if part.inline_image is not None:
                return part.inline_image
        return None
