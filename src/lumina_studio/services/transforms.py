"""Builds transform instructions for the image-generation service."""

from lumina_studio.domain.errors import InvalidRequestError
from lumina_studio.domain.transforms import TransformMode, TransformRequest

REMOVE_INSTRUCTION = (
    "Remove the background from this image. Keep only the main subject. "
    "Return the image with a clean, solid white background."
)


def build_transform_request(
    mode: TransformMode, prompt_text: str | None = None
) -> TransformRequest:
    """Return the request for a mode, validating the prompt for replace."""
    if mode is TransformMode.REMOVE:
        return TransformRequest(
            mode=mode, prompt_text=None, instruction=REMOVE_INSTRUCTION
        )

    cleaned = (prompt_text or "").strip()
    if not cleaned:
        raise InvalidRequestError("Describe the new background before generating.")
    return TransformRequest(
        mode=mode,
        prompt_text=cleaned,
        instruction=_replace_instruction(cleaned),
    )


def _replace_instruction(description: str) -> str:
    return (
        "Remove the background from this image and replace it with a "
        f"professional background based on this description: {description}. "
        "Ensure the lighting on the subject matches the new background."
    )
