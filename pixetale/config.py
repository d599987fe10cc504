"""
Runtime settings for PixeTale, resolved from environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_TEXT_MODEL = "gemini/gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "black-forest-labs/flux-schnell"
DEFAULT_IMAGE_DELAY_SECONDS = 10.0
DEFAULT_IMAGE_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY = 2.0
DEFAULT_PAGE_COUNT = 10


@dataclass(frozen=True)
class PixetaleSettings:
    """
    Knobs shared by the story writer, the image generator, and the orchestrator.

    Attributes
    ----------
    text_model:
        LiteLLM model identifier used for the structured story request.
    text_api_key:
        Optional API key forwarded to LiteLLM. When ``None`` LiteLLM reads the
        provider's own environment variable.
    image_model:
        Replicate model identifier (``owner/model`` or ``owner/model:version``).
    image_api_token:
        Replicate API token.
    image_delay_seconds:
        Fixed pause between consecutive image requests, to stay under the image
        service's rate limit.
    image_max_attempts:
        Attempts allowed per illustration before falling back.
    image_retry_base_delay:
        Base of the attempt-indexed backoff between illustration attempts.
    page_count:
        Number of pages requested from the story model.
    log_level:
        Level passed to :func:`pixetale.common.log.setup_logger` by the scripts.
    """

    text_model: str = DEFAULT_TEXT_MODEL
    text_api_key: str | None = None
    image_model: str = DEFAULT_IMAGE_MODEL
    image_api_token: str | None = None
    image_delay_seconds: float = DEFAULT_IMAGE_DELAY_SECONDS
    image_max_attempts: int = DEFAULT_IMAGE_ATTEMPTS
    image_retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY
    page_count: int = DEFAULT_PAGE_COUNT
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.image_delay_seconds < 0:
            raise ValueError("image_delay_seconds must not be negative.")
        if self.image_max_attempts < 1:
            raise ValueError("image_max_attempts must be at least 1.")
        if self.image_retry_base_delay < 0:
            raise ValueError("image_retry_base_delay must not be negative.")
        if self.page_count < 1:
            raise ValueError("page_count must be at least 1.")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "PixetaleSettings":
        """
        Build settings from ``environ`` (defaults to :data:`os.environ`).
        """
        env = os.environ if environ is None else environ

        return cls(
            text_model=_first(
                env,
                "PIXETALE_STORY_MODEL",
                "LITELLM_STORY_MODEL",
                "LITELLM_MODEL",
            )
            or DEFAULT_TEXT_MODEL,
            text_api_key=_first(env, "GEMINI_API_KEY", "LITELLM_API_KEY"),
            image_model=_first(env, "PIXETALE_IMAGE_MODEL", "REPLICATE_MODEL")
            or DEFAULT_IMAGE_MODEL,
            image_api_token=_first(env, "REPLICATE_API_TOKEN"),
            image_delay_seconds=_parse_number(
                env, "PIXETALE_IMAGE_DELAY", float, DEFAULT_IMAGE_DELAY_SECONDS
            ),
            image_max_attempts=_parse_number(
                env, "PIXETALE_IMAGE_ATTEMPTS", int, DEFAULT_IMAGE_ATTEMPTS
            ),
            image_retry_base_delay=_parse_number(
                env, "PIXETALE_RETRY_DELAY", float, DEFAULT_RETRY_BASE_DELAY
            ),
            page_count=_parse_number(env, "PIXETALE_PAGE_COUNT", int, DEFAULT_PAGE_COUNT),
            log_level=(_first(env, "PIXETALE_LOG_LEVEL") or "INFO").upper(),
        )


def _first(env: Mapping[str, str], *names: str) -> str | None:
    for name in names:
        value = env.get(name)
        if value and value.strip():
            return value.strip()
    return None


def _parse_number(env: Mapping[str, str], name: str, cast: type, default):
    raw = _first(env, name)
    if raw is None:
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ValueError(f"Environment variable {name} must be a number, got {raw!r}.") from exc
