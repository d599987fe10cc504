"""
End-to-end orchestration and session state for PixeTale quests.
"""

from .pipeline import (
    IllustrationResult,
    PixetaleOrchestrator,
    ProgressCallback,
    page_progress,
)
from .state import QuestController, QuestState

__all__ = [
    "IllustrationResult",
    "PixetaleOrchestrator",
    "ProgressCallback",
    "page_progress",
    "QuestController",
    "QuestState",
]
