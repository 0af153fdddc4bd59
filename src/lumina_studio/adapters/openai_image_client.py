"""OpenAI Responses API client for image editing."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from lumina_studio.domain.generation import (
    Candidate,
    Content,
    ContentPart,
    GenerationRequest,
    GenerationResponse,
    InlineImage,
)
from lumina_studio.services.dispatch import ImageGenerationClient

_OUTPUT_FORMAT = "png"


@dataclass
class OpenAIImageClient(ImageGenerationClient):
    """Image-generation client backed by the OpenAI image_generation tool."""

    client: AsyncOpenAI
    image_model: str | None = None

    @classmethod
    def create(
        cls,
        api_key: str,
        timeout_seconds: float,
        image_model: str | None = None,
    ) -> "OpenAIImageClient":
        """Create a client with a managed httpx session."""
        http_client = httpx.AsyncClient(timeout=timeout_seconds)
        return cls(
            client=AsyncOpenAI(api_key=api_key, http_client=http_client),
            image_model=image_model,
        )

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        """Send the image and instruction, returning output parts in order."""
        tool: dict[str, object] = {
            "type": "image_generation",
            "output_format": _OUTPUT_FORMAT,
        }
        if self.image_model:
            tool["model"] = self.image_model

        response = await self.client.responses.create(
            model=request.model,
            input=[{"role": "user", "content": _input_content(request)}],
            tools=[tool],
        )
        return _to_generation_response(response.output or [])

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()


def _input_content(request: GenerationRequest) -> list[dict[str, object]]:
    content: list[dict[str, object]] = []
    for part in request.content.parts:
        if part.inline_image is not None:
            image = part.inline_image
            content.append(
                {
                    "type": "input_image",
                    "image_url": f"data:{image.media_type};base64,{image.data}",
                }
            )
        if part.text:
            content.append({"type": "input_text", "text": part.text})
    return content


def _to_generation_response(output: list[object]) -> GenerationResponse:
    """Map Responses API output items onto a single candidate."""
    parts: list[ContentPart] = []
    for item in output:
        item_type = getattr(item, "type", None)
        if item_type == "image_generation_call":
            result = getattr(item, "result", None)
            if result:
                parts.append(
                    ContentPart(
                        inline_image=InlineImage(
                            data=result, media_type=f"image/{_OUTPUT_FORMAT}"
                        )
                    )
                )
        elif item_type == "message":
            for block in getattr(item, "content", None) or []:
                text = getattr(block, "text", None)
                if text:
                    parts.append(ContentPart(text=text))
    return GenerationResponse(candidates=[Candidate(content=Content(parts=parts))])
