"""Tests for transform request building and presets."""

import pytest

from lumina_studio.domain.errors import InvalidRequestError
from lumina_studio.domain.transforms import (
    Preset,
    TransformMode,
    background_presets,
    find_preset,
)
from lumina_studio.services.transforms import (
    REMOVE_INSTRUCTION,
    build_transform_request,
)


def test_remove_ignores_prompt() -> None:
    request = build_transform_request(TransformMode.REMOVE, "a beach at sunset")

    assert request.mode is TransformMode.REMOVE
    assert request.prompt_text is None
    assert request.instruction == REMOVE_INSTRUCTION
    assert "white background" in request.instruction


def test_replace_embeds_prompt_and_lighting_requirement() -> None:
    request = build_transform_request(TransformMode.REPLACE, "  marble surface  ")

    assert request.prompt_text == "marble surface"
    assert "marble surface" in request.instruction
    assert "lighting" in request.instruction


@pytest.mark.parametrize("prompt", [None, "", "   "])
def test_replace_requires_prompt(prompt: str | None) -> None:
    with pytest.raises(InvalidRequestError):
        build_transform_request(TransformMode.REPLACE, prompt)


def test_presets_are_listed_and_found_by_slug() -> None:
    presets = background_presets()

    assert len(presets) == len(list(Preset))
    assert find_preset("cyberpunk").name == "Cyberpunk"
    with pytest.raises(KeyError):
        find_preset("moon-base")
