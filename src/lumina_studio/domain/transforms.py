"""Domain models for transform requests and background presets."""

from dataclasses import dataclass
from enum import Enum


class TransformMode(str, Enum):
    """Supported background transforms."""

    REMOVE = "remove"
    REPLACE = "replace"


@dataclass(frozen=True)
class TransformRequest:
    """Instruction payload sent alongside the original image."""

    mode: TransformMode
    prompt_text: str | None
    instruction: str


@dataclass(frozen=True)
class BackgroundPreset:
    """Declarative background preset definition."""

    slug: str
    name: str
    prompt: str


class Preset(Enum):
    """Enum of background presets (single source of truth)."""

    STUDIO_WHITE = BackgroundPreset(
        "studio-white",
        "Studio White",
        "Clean professional studio background, pure white, soft shadows",
    )
    MODERN_OFFICE = BackgroundPreset(
        "modern-office",
        "Modern Office",
        "Blurred modern office interior, bright natural light, professional",
    )
    NATURE_PARK = BackgroundPreset(
        "nature-park",
        "Nature Park",
        "Beautiful sunny park background, soft bokeh, green trees",
    )
    CYBERPUNK = BackgroundPreset(
        "cyberpunk",
        "Cyberpunk",
        "Neon city at night, futuristic vibes, purple and blue lighting",
    )


def find_preset(slug: str) -> BackgroundPreset:
    """Return the preset with the given slug or raise KeyError."""
    for entry in Preset:
        if entry.value.slug == slug:
            return entry.value
    raise KeyError(slug)


def background_presets() -> list[dict[str, str]]:
    """Return presets formatted for API responses."""
    return [
        {
            "slug": entry.value.slug,
            "name": entry.value.name,
            "prompt": entry.value.prompt,
        }
        for entry in Preset
    ]
