"""
PixeTale package exposing story generation, the quest pipeline, and book exports.
"""

from .config import PixetaleSettings
from .errors import (
    FailureKind,
    GenerationFailure,
    ImageGenerationFailure,
    PixetaleError,
    QuestFailure,
    RateLimitFailure,
)
from .html_export import ExportKind, StorybookHTMLExporter
from .pdf_generation import StorybookPDFBuilder
from .pipeline import PixetaleOrchestrator, QuestController, QuestState
from .story_generation import (
    GenerationStatus,
    HeroTraits,
    StoryDocument,
    StoryLanguage,
    StoryPage,
    TextPosition,
)

__all__ = [
    "PixetaleSettings",
    "FailureKind",
    "GenerationFailure",
    "ImageGenerationFailure",
    "PixetaleError",
    "QuestFailure",
    "RateLimitFailure",
    "ExportKind",
    "StorybookHTMLExporter",
    "StorybookPDFBuilder",
    "PixetaleOrchestrator",
    "QuestController",
    "QuestState",
    "GenerationStatus",
    "HeroTraits",
    "StoryDocument",
    "StoryLanguage",
    "StoryPage",
    "TextPosition",
]
