"""
Application state for a single PixeTale session.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable

from loguru import logger

from pixetale.errors import QuestFailure
from pixetale.story_generation import GenerationStatus, HeroTraits, StoryDocument, StoryLanguage

from .pipeline import DEFAULT_FAILURE_MESSAGE, WRITING_PROGRESS, PixetaleOrchestrator


@dataclass(frozen=True)
class QuestState:
    """Snapshot read by the presentation layer."""

    status: GenerationStatus = GenerationStatus.IDLE
    story: StoryDocument | None = None
    progress: int = 0
    error: str | None = None
    topic: str = ""
    language: StoryLanguage = StoryLanguage.ENGLISH
    hero_traits: HeroTraits | None = None

    @property
    def is_busy(self) -> bool:
        return self.status in (GenerationStatus.WRITING, GenerationStatus.ILLUSTRATING)


StateListener = Callable[[QuestState], None]


class QuestController:
    """
    Owns the quest state and mutates it only through :meth:`start` and :meth:`restart`.

    Orchestrator publications are applied as they arrive. Publications from a run that
    began before the latest :meth:`restart` are dropped, so an abandoned run never
    overwrites the fresh state.
    """

    def __init__(self, orchestrator: PixetaleOrchestrator | None = None) -> None:
        self._orchestrator = orchestrator or PixetaleOrchestrator()
        self._state = QuestState()
        self._session = 0
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> QuestState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` for every new snapshot; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def start(
        self,
        topic: str,
        language: StoryLanguage | str = StoryLanguage.ENGLISH,
        hero_traits: HeroTraits | None = None,
    ) -> StoryDocument | None:
        """
        Run a quest for ``topic``. Blank topics are ignored.

        Returns the finished story, or ``None`` when the topic was blank, the quest
        failed, or :meth:`restart` was called while it ran.
        """
        if not topic or not topic.strip():
            logger.debug("Ignoring quest start with an empty topic.")
            return None

        language = StoryLanguage.parse(language)
        self._session += 1
        session = self._session

        self._update(
            error=None,
            status=GenerationStatus.WRITING,
            progress=WRITING_PROGRESS,
            topic=topic,
            language=language,
            hero_traits=hero_traits,
        )

        def _on_progress(stage: str, payload: dict[str, Any]) -> None:
            self._apply_progress(session, stage, payload)

        try:
            story = self._orchestrator.run(topic, language, hero_traits, on_progress=_on_progress)
        except QuestFailure as exc:
            if session == self._session:
                self._update(
                    status=GenerationStatus.ERROR,
                    error=str(exc) or DEFAULT_FAILURE_MESSAGE,
                )
            return None

        if session != self._session:
            return None
        return story

    def restart(self) -> None:
        """Drop the story and return to the idle input form."""
        self._session += 1
        self._update(
            story=None,
            status=GenerationStatus.IDLE,
            topic="",
            progress=0,
            error=None,
        )

    def _apply_progress(self, session: int, stage: str, payload: dict[str, Any]) -> None:
        if session != self._session:
            logger.debug("Dropping stale '{}' update from an abandoned quest.", stage)
            return

        changes: dict[str, Any] = {}
        if "status" in payload:
            changes["status"] = payload["status"]
        if "progress" in payload:
            changes["progress"] = max(self._state.progress, int(payload["progress"]))
        if "story" in payload:
            changes["story"] = payload["story"]
        if changes:
            self._update(**changes)

    def _update(self, **changes: Any) -> None:
        self._state = replace(self._state, **changes)
        for listener in list(self._listeners):
            listener(self._state)
