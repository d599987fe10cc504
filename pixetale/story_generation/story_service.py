"""
Service layer for producing illustrated story skeletons via LiteLLM-compatible models.
"""

from __future__ import annotations

import json
import os
from dataclasses import replace
from typing import Any

from loguru import logger

from pixetale.common import ChatResult, CompletionCallable, call_chat_completion, strip_code_fence
from pixetale.config import DEFAULT_PAGE_COUNT, DEFAULT_TEXT_MODEL
from pixetale.errors import GenerationFailure

from .hero import HeroTraits
from .models import StoryDocument, StoryLanguage
from .prompting import StoryPrompt, build_story_prompt, story_response_format


class StoryWriter:
    """
    Turns an adventure topic (plus optional hero traits) into a :class:`StoryDocument`.

    The returned document carries the title, the cover prompt, and every page's text and
    image prompt; no image has been generated yet.
    """

    def __init__(
        self,
        *,
        api_key: str | None = None,
        model: str | None = None,
        completion_fn: CompletionCallable | None = None,
        page_count: int = DEFAULT_PAGE_COUNT,
    ) -> None:
        self._api_key = api_key or os.getenv("GEMINI_API_KEY") or os.getenv("LITELLM_API_KEY")
        self._model = (
            model
            or os.getenv("PIXETALE_STORY_MODEL")
            or os.getenv("LITELLM_STORY_MODEL")
            or os.getenv("LITELLM_MODEL")
            or DEFAULT_TEXT_MODEL
        )
        self._completion_fn: CompletionCallable = completion_fn or call_chat_completion
        self._page_count = page_count

    @property
    def model(self) -> str:
        """Return the model identifier in use."""
        return self._model

    def generate_story(
        self,
        topic: str,
        language: StoryLanguage | str = StoryLanguage.ENGLISH,
        hero_traits: HeroTraits | None = None,
        *,
        temperature: float = 0.9,
        max_output_tokens: int | None = 4096,
        **response_kwargs: Any,
    ) -> StoryDocument:
        """
        Invoke the configured LLM once and parse its structured reply.

        Raises
        ------
        GenerationFailure
            When the call fails, the reply is empty, or it does not match the story shape.
        """
        language = StoryLanguage.parse(language)
        prompt: StoryPrompt = build_story_prompt(
            topic,
            language,
            hero_traits,
            page_count=self._page_count,
        )
        logger.debug("Story prompt for {!r}:\n{}", topic, prompt.user)

        messages = [
            {"role": "system", "content": prompt.system},
            {"role": "user", "content": prompt.user},
        ]

        try:
            result: ChatResult = self._completion_fn(
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_output_tokens,
                api_key=self._api_key,
                response_format=story_response_format(),
                **response_kwargs,
            )
        except Exception as exc:
            raise GenerationFailure(f"Story generation request failed: {exc}") from exc

        if not result.text:
            raise GenerationFailure("No story content received")

        story = parse_story_payload(result.text)
        logger.info("Story {!r} written with {} pages.", story.title, story.page_count)
        return story


def parse_story_payload(raw_text: str) -> StoryDocument:
    """
    Parse the model's JSON reply into a :class:`StoryDocument` without images.
    """
    try:
        parsed = json.loads(strip_code_fence(raw_text))
    except json.JSONDecodeError as exc:
        raise GenerationFailure("Failed to parse story response as JSON.") from exc

    if not isinstance(parsed, dict):
        raise GenerationFailure("Story response must be a JSON object.")

    pages = parsed.get("pages")
    if isinstance(pages, list):
        numbers = [entry.get("pageNumber") for entry in pages if isinstance(entry, dict)]
        if numbers != list(range(1, len(pages) + 1)):
            logger.warning("Story pages were numbered {}; renumbering in reading order.", numbers)

    try:
        story = StoryDocument.from_dict(parsed)
    except ValueError as exc:
        raise GenerationFailure(f"Story response has an unexpected structure: {exc}") from exc

    # Images are produced later by the pipeline; ignore any the model invented.
    if story.cover_image_url or any(page.image_url for page in story.pages):
        story = replace(
            story,
            cover_image_url=None,
            pages=tuple(replace(page, image_url=None) for page in story.pages),
        )
    return story
