"""
Orchestrates a PixeTale quest: story text, then the cover, then every page illustration.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Any, Callable

from loguru import logger

from pixetale.ai_generation import PLACEHOLDER_IMAGE_URI, ReplicateImageGenerator
from pixetale.common import CompletionCallable
from pixetale.config import DEFAULT_IMAGE_DELAY_SECONDS, PixetaleSettings
from pixetale.errors import ImageGenerationFailure, QuestFailure
from pixetale.story_generation import (
    GenerationStatus,
    HeroTraits,
    StoryDocument,
    StoryLanguage,
    StoryWriter,
)

ProgressCallback = Callable[[str, dict[str, Any]], None]

WRITING_PROGRESS = 10
COVER_PROGRESS = 25
COMPLETE_PROGRESS = 100
DEFAULT_FAILURE_MESSAGE = "Failed to start quest. Please try again later."


def page_progress(completed_pages: int, total_pages: int) -> int:
    """
    Progress after ``completed_pages`` of ``total_pages`` illustrations: 25 → 100.
    """
    if total_pages <= 0:
        return COMPLETE_PROGRESS
    share = (COMPLETE_PROGRESS - COVER_PROGRESS) * completed_pages / total_pages
    return COVER_PROGRESS + math.floor(share + 0.5)


@dataclass(frozen=True)
class IllustrationResult:
    """Outcome of one illustration request: an image or the failure that replaced it."""

    image: str | None = None
    error: ImageGenerationFailure | None = None

    @property
    def ok(self) -> bool:
        return self.image is not None

    def unwrap_or(self, default: str) -> str:
        return self.image if self.image is not None else default


class PixetaleOrchestrator:
    """
    High-level coordinator that chains the story call and the illustration calls.

    Calls are strictly sequential. A fixed pause of ``image_delay_seconds`` separates
    consecutive image requests to respect the image service's rate limit. Only a
    failure of the story step aborts a run; illustration failures leave the cover
    empty or put :data:`PLACEHOLDER_IMAGE_URI` on the page.
    """

    def __init__(
        self,
        *,
        story_writer: StoryWriter | None = None,
        image_generator: ReplicateImageGenerator | None = None,
        story_model: str | None = None,
        story_api_key: str | None = None,
        completion_fn: CompletionCallable | None = None,
        image_delay_seconds: float = DEFAULT_IMAGE_DELAY_SECONDS,
        sleep_fn: Callable[[float], None] = time.sleep,
        placeholder_image: str = PLACEHOLDER_IMAGE_URI,
    ) -> None:
        if image_delay_seconds < 0:
            raise ValueError("image_delay_seconds must not be negative.")

        self._story_writer = story_writer or StoryWriter(
            api_key=story_api_key,
            model=story_model,
            completion_fn=completion_fn,
        )
        self._image_generator = image_generator or ReplicateImageGenerator()
        self._image_delay_seconds = image_delay_seconds
        self._sleep = sleep_fn
        self._placeholder_image = placeholder_image

    @classmethod
    def from_settings(
        cls,
        settings: PixetaleSettings,
        *,
        completion_fn: CompletionCallable | None = None,
        replicate_client: Any = None,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> "PixetaleOrchestrator":
        """Wire both generation clients from a :class:`PixetaleSettings` instance."""
        story_writer = StoryWriter(
            api_key=settings.text_api_key,
            model=settings.text_model,
            completion_fn=completion_fn,
            page_count=settings.page_count,
        )
        image_generator = ReplicateImageGenerator(
            api_token=settings.image_api_token,
            model_identifier=settings.image_model,
            client=replicate_client,
            max_attempts=settings.image_max_attempts,
            retry_base_delay=settings.image_retry_base_delay,
            sleep_fn=sleep_fn,
        )
        return cls(
            story_writer=story_writer,
            image_generator=image_generator,
            image_delay_seconds=settings.image_delay_seconds,
            sleep_fn=sleep_fn,
        )

    @property
    def image_delay_seconds(self) -> float:
        return self._image_delay_seconds

    def run(
        self,
        topic: str,
        language: StoryLanguage | str = StoryLanguage.ENGLISH,
        hero_traits: HeroTraits | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> StoryDocument:
        """
        Produce a fully illustrated :class:`StoryDocument`.

        ``on_progress`` receives ``(stage, payload)`` after every step. The payload always
        carries ``status`` and ``progress``; stages that change the book also carry the
        new ``story``.

        Raises
        ------
        QuestFailure
            When the story text cannot be generated.
        """
        self._notify(
            on_progress,
            "story:writing",
            status=GenerationStatus.WRITING,
            progress=WRITING_PROGRESS,
            topic=topic,
        )
        try:
            story = self._story_writer.generate_story(topic, language, hero_traits)
        except Exception as exc:
            logger.error("Story generation failed for {!r}: {}", topic, exc)
            raise QuestFailure(str(exc) or DEFAULT_FAILURE_MESSAGE) from exc

        self._notify(
            on_progress,
            "story:written",
            status=GenerationStatus.ILLUSTRATING,
            progress=WRITING_PROGRESS,
            story=story,
            total_pages=story.page_count,
        )

        cover = self.illustrate(story.cover_image_prompt)
        if cover.ok:
            story = story.with_cover_image(cover.image)
        else:
            logger.error("Failed to generate cover for {!r}: {}", story.title, cover.error)
        self._notify(
            on_progress,
            "cover:done",
            status=GenerationStatus.ILLUSTRATING,
            progress=COVER_PROGRESS,
            story=story,
            cover_generated=cover.ok,
        )

        story = self._illustrate_pages(story, on_progress)

        self._notify(
            on_progress,
            "quest:complete",
            status=GenerationStatus.READY,
            progress=COMPLETE_PROGRESS,
            story=story,
        )
        logger.info("Quest {!r} complete with {} pages.", story.title, story.page_count)
        return story

    def illustrate(self, prompt: str) -> IllustrationResult:
        """
        Request one illustration and fold any failure into an :class:`IllustrationResult`.
        """
        try:
            return IllustrationResult(image=self._image_generator.generate_illustration(prompt))
        except ImageGenerationFailure as exc:
            return IllustrationResult(error=exc)
        except Exception as exc:
            logger.exception("Unexpected illustration error")
            return IllustrationResult(
                error=ImageGenerationFailure(str(exc), last_error=exc, attempts=1)
            )

    def _illustrate_pages(
        self,
        story: StoryDocument,
        on_progress: ProgressCallback | None,
    ) -> StoryDocument:
        total_pages = story.page_count

        self._notify(
            on_progress,
            "pages:waiting",
            status=GenerationStatus.ILLUSTRATING,
            progress=COVER_PROGRESS,
            delay_seconds=self._image_delay_seconds,
        )
        self._pause()

        for index in range(total_pages):
            page = story.pages[index]
            if index > 0:
                self._pause()

            self._notify(
                on_progress,
                "page:processing",
                status=GenerationStatus.ILLUSTRATING,
                progress=page_progress(index, total_pages),
                page_number=page.page_number,
                total_pages=total_pages,
            )
            result = self.illustrate(page.image_prompt)
            if not result.ok:
                logger.error(
                    "Failed to generate image for page {}: {}", page.page_number, result.error
                )
            story = story.with_page_image(index, result.unwrap_or(self._placeholder_image))

            completed = index + 1
            # The last page completes the book, so it is published together with READY.
            status = (
                GenerationStatus.READY if completed == total_pages else GenerationStatus.ILLUSTRATING
            )
            self._notify(
                on_progress,
                "page:done",
                status=status,
                progress=page_progress(completed, total_pages),
                story=story,
                page_number=page.page_number,
                total_pages=total_pages,
                placeholder=not result.ok,
            )
        return story

    def _pause(self) -> None:
        if self._image_delay_seconds > 0:
            self._sleep(self._image_delay_seconds)

    @staticmethod
    def _notify(
        callback: ProgressCallback | None,
        stage: str,
        **payload: Any,
    ) -> None:
        if callback is not None:
            callback(stage, payload)
