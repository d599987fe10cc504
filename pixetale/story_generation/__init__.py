"""
Story generation utilities: data model, hero traits, prompts, and the story writer.
"""

from .hero import HERO_KINDS, HeroTraits
from .models import GenerationStatus, StoryDocument, StoryLanguage, StoryPage, TextPosition
from .prompting import STORY_RESPONSE_SCHEMA, StoryPrompt, build_story_prompt
from .story_service import StoryWriter, parse_story_payload

__all__ = [
    "HERO_KINDS",
    "HeroTraits",
    "GenerationStatus",
    "StoryDocument",
    "StoryLanguage",
    "StoryPage",
    "TextPosition",
    "STORY_RESPONSE_SCHEMA",
    "StoryPrompt",
    "build_story_prompt",
    "StoryWriter",
    "parse_story_payload",
]
