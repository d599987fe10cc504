"""
Prompt construction utilities for PixeTale illustration requests.
"""

from __future__ import annotations

from dataclasses import dataclass

STYLE_PREAMBLE = (
    "16-bit pixel art style, retro rpg aesthetic, vibrant colors, detailed, high resolution, "
    "masterpiece, fantasy adventure style."
)

NEGATIVE_CONSTRAINTS = (
    "IMPORTANT: NO text, NO speech bubbles, NO words, NO interface, NO hud, pure illustration."
)

ILLUSTRATION_ASPECT_RATIO = "3:4"


@dataclass(frozen=True)
class IllustrationPrompt:
    """Prompt text and framing passed to the image model."""

    positive: str
    aspect_ratio: str = ILLUSTRATION_ASPECT_RATIO


def build_illustration_prompt(scene_description: str) -> IllustrationPrompt:
    """
    Wrap a scene description with the fixed pixel-art preamble and no-text suffix.
    """
    if not scene_description or not scene_description.strip():
        raise ValueError("scene_description must be a non-empty string.")

    positive = (
        f"{STYLE_PREAMBLE}\n"
        f"Scene description: {scene_description.strip()}.\n"
        f"{NEGATIVE_CONSTRAINTS}"
    )
    return IllustrationPrompt(positive=positive)
