"""
Prompt construction utilities for the PixeTale story generation request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pixetale.config import DEFAULT_PAGE_COUNT

from .hero import HeroTraits
from .models import StoryLanguage

BOTTOM_TEXT_LAYOUT = (
    "...subject centered in the UPPER 70% of the frame, leave EMPTY DARK SPACE or simple "
    "ground at the BOTTOM 30% for text, wide shot."
)
TOP_TEXT_LAYOUT = (
    "...subject centered in the LOWER 70% of the frame, leave EMPTY SKY or simple ceiling "
    "at the TOP 30% for text, wide shot."
)
IMAGE_PROMPT_SUFFIX = (
    "no text, no speech bubbles, vertical composition, cinematic shot, 16-bit pixel art style"
)

STORY_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "coverImagePrompt": {
            "type": "string",
            "description": "Iconic visual description for the book cover.",
        },
        "pages": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "pageNumber": {"type": "integer"},
                    "content": {"type": "string"},
                    "imagePrompt": {
                        "type": "string",
                        "description": "Visual description enforcing negative space for text.",
                    },
                    "textPosition": {
                        "type": "string",
                        "enum": ["top", "bottom"],
                        "description": "Position of text. MUST match the negative space in the image.",
                    },
                },
                "required": ["pageNumber", "content", "imagePrompt", "textPosition"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["title", "coverImagePrompt", "pages"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class StoryPrompt:
    """
    Container for the system and user prompts passed to the story model.
    """

    system: str
    user: str


def story_response_format() -> dict[str, Any]:
    """
    LiteLLM ``response_format`` payload asking for schema-constrained JSON.
    """
    return {
        "type": "json_schema",
        "json_schema": {
            "name": "storybook",
            "schema": STORY_RESPONSE_SCHEMA,
            "strict": True,
        },
    }


def build_language_instruction(language: StoryLanguage) -> str:
    if language is StoryLanguage.BILINGUAL:
        return (
            "Language: Bilingual. Write every page in BOTH English and Spanish.\n"
            "Structure each page content as:\n"
            "[English Paragraph]\n"
            "\n"
            "[Spanish Paragraph]\n"
            "Ensure strictly that there is a double line break (blank line) separating the "
            "English text and the Spanish translation."
        )
    return f"Language: {language.value}."


def build_character_instruction(hero: HeroTraits | None) -> str:
    if hero is None or not hero.is_personalized:
        return "The main protagonist is determined by the story topic."

    return (
        f"IMPORTANT PERSONALIZATION: The main protagonist MUST be a {hero.description()}.\n"
        f'Use the name "{hero.name or "Hero"}" in the text.\n'
        "\n"
        "CRITICAL VISUAL CONSISTENCY: Every single image prompt MUST describe the character "
        f'exactly like this: "{hero.visual_signature()}".'
    )


def build_story_prompt(
    topic: str,
    language: StoryLanguage = StoryLanguage.ENGLISH,
    hero: HeroTraits | None = None,
    *,
    page_count: int = DEFAULT_PAGE_COUNT,
) -> StoryPrompt:
    """
    Build the prompt pair used to request a complete illustrated story.
    """
    if not topic or not topic.strip():
        raise ValueError("topic must be a non-empty string.")
    if page_count < 1:
        raise ValueError("page_count must be at least 1.")

    system_prompt = f"""You are PixeTale, a children's author who writes short retro-game adventures
and directs the 16-bit pixel art that illustrates them.

Writing directives:
- The tone should be engaging and adventurous, warm and safe for young readers.
- Each page should have roughly 2 sentences per language (keep it short to fit the page).
- Keep the story coherent from the first page to a satisfying ending.

CRITICAL INSTRUCTIONS FOR IMAGE COMPOSITION & LAYOUT:
1. First, create a "Visual Character Profile" based on the personalization details provided. Use this consistent look for every image.
2. COVER IMAGE: Create a specific prompt for the book cover. Iconic, centered, heroic.
3. PAGE LAYOUT LOGIC (MANDATORY): You MUST vary the "textPosition" (top/bottom) and DESIGN the "imagePrompt" to leave EMPTY SPACE for that text.
   - CASE A: If you choose 'textPosition': 'bottom':
     The 'imagePrompt' MUST end with: "{BOTTOM_TEXT_LAYOUT}"
   - CASE B: If you choose 'textPosition': 'top':
     The 'imagePrompt' MUST end with: "{TOP_TEXT_LAYOUT}"
4. For EVERY 'imagePrompt', start with the character profile.
5. Append "{IMAGE_PROMPT_SUFFIX}" to every image prompt.

Respond only with JSON containing title, coverImagePrompt, and pages
(pageNumber, content, imagePrompt, textPosition)."""

    user_prompt = f"""Write a charming {page_count}-page children's adventure story about: "{topic.strip()}".

{build_language_instruction(language)}

{build_character_instruction(hero)}"""

    return StoryPrompt(system=system_prompt, user=user_prompt)
