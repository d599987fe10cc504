"""
Integration with Replicate for pixel-art storybook illustrations.
"""

from __future__ import annotations

import os
import time
from functools import partial
from typing import Any, Callable

import replicate
from loguru import logger

from pixetale.config import DEFAULT_IMAGE_ATTEMPTS, DEFAULT_IMAGE_MODEL, DEFAULT_RETRY_BASE_DELAY
from pixetale.errors import (
    FailureKind,
    ImageGenerationFailure,
    RateLimitFailure,
    classify_image_error,
)

from .images import download_image, first_image_data_uri
from .prompting import IllustrationPrompt, build_illustration_prompt


def _build_flux_schnell_input(*, prompt: IllustrationPrompt) -> dict[str, Any]:
    return {
        "prompt": prompt.positive,
        "aspect_ratio": prompt.aspect_ratio,
        "output_format": "png",
        "num_outputs": 1,
    }


def _build_flux_dev_input(*, prompt: IllustrationPrompt) -> dict[str, Any]:
    return {
        "prompt": prompt.positive,
        "aspect_ratio": prompt.aspect_ratio,
        "output_format": "png",
        "num_outputs": 1,
        "guidance": 3.5,
    }


def _build_flux_pro_input(*, prompt: IllustrationPrompt) -> dict[str, Any]:
    return {
        "prompt": prompt.positive,
        "aspect_ratio": prompt.aspect_ratio,
        "output_format": "png",
        "safety_tolerance": 2,
        "prompt_upsampling": False,
    }


def _build_imagen_input(*, prompt: IllustrationPrompt) -> dict[str, Any]:
    return {
        "prompt": prompt.positive,
        "aspect_ratio": prompt.aspect_ratio,
        "output_format": "png",
        "safety_filter_level": "block_only_high",
    }


_MODEL_INPUT_BUILDERS: dict[str, Callable[..., dict[str, Any]]] = {
    "black-forest-labs/flux-schnell": _build_flux_schnell_input,
    "black-forest-labs/flux-dev": _build_flux_dev_input,
    "black-forest-labs/flux-1.1-pro": _build_flux_pro_input,
    "google/imagen-4": _build_imagen_input,
}


def _resolve_input_builder(model_identifier: str) -> Callable[..., dict[str, Any]]:
    normalized_identifier = model_identifier.strip().lower()
    builder = _MODEL_INPUT_BUILDERS.get(normalized_identifier)
    if builder is None and ":" in normalized_identifier:
        base_identifier = normalized_identifier.split(":", maxsplit=1)[0]
        builder = _MODEL_INPUT_BUILDERS.get(base_identifier)
    if builder is None:
        supported_models = ", ".join(sorted(_MODEL_INPUT_BUILDERS))
        raise ValueError(
            "Model identifier "
            f"'{model_identifier}' is not configured with a default input payload. "
            f"Supported models: {supported_models}."
        )
    return builder


class ReplicateImageGenerator:
    """
    Convenience wrapper around the Replicate client for storybook illustrations.

    Parameters
    ----------
    api_token:
        Replicate API token. Falls back to ``REPLICATE_API_TOKEN`` environment variable.
    model_identifier:
        Model string in the ``owner/model`` or ``owner/model:version`` format. Falls back
        to ``PIXETALE_IMAGE_MODEL``/``REPLICATE_MODEL``, then to FLUX schnell.
    client:
        Optional pre-configured :class:`replicate.Client`. Mainly useful for testing.
    max_attempts:
        Attempts per illustration before raising :class:`ImageGenerationFailure`.
    retry_base_delay:
        Seconds to wait after the first failed attempt; the wait grows linearly with
        the attempt number (2s, 4s with the default).
    sleep_fn:
        Callable used to wait between attempts.
    download_timeout:
        Timeout for fetching images when the model answers with URLs.
    """

    def __init__(
        self,
        *,
        api_token: str | None = None,
        model_identifier: str | None = None,
        client: replicate.Client | None = None,
        max_attempts: int = DEFAULT_IMAGE_ATTEMPTS,
        retry_base_delay: float = DEFAULT_RETRY_BASE_DELAY,
        sleep_fn: Callable[[float], None] = time.sleep,
        download_timeout: float = 60.0,
    ) -> None:
        self._api_token = api_token or os.getenv("REPLICATE_API_TOKEN")
        if not self._api_token and not client:
            raise ValueError(
                "Replicate API token is required. Set REPLICATE_API_TOKEN or pass api_token."
            )

        self._model_identifier = (
            model_identifier
            or os.getenv("PIXETALE_IMAGE_MODEL")
            or os.getenv("REPLICATE_MODEL")
            or DEFAULT_IMAGE_MODEL
        )
        self._input_builder = _resolve_input_builder(self._model_identifier)

        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")

        self._client = client or replicate.Client(api_token=self._api_token)
        self._max_attempts = max_attempts
        self._retry_base_delay = retry_base_delay
        self._sleep = sleep_fn
        self._downloader = partial(download_image, timeout=download_timeout)

    @property
    def model_identifier(self) -> str:
        """Return the model identifier currently used."""
        return self._model_identifier

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def generate_illustration(self, scene_description: str, **model_kwargs: Any) -> str:
        """
        Generate one pixel-art illustration and return it as a data URI.

        Parameters
        ----------
        scene_description:
            Image prompt written by the story model for the cover or a page.
        **model_kwargs:
            Additional keyword arguments forwarded directly to the Replicate model input.

        Raises
        ------
        RateLimitFailure
            On the first quota or rate-limit signal; no local retry is made so the
            caller can apply its own pacing.
        ImageGenerationFailure
            When a credential error occurs, or when every attempt failed or came back
            without an image.
        """
        prompt = build_illustration_prompt(scene_description)
        replicate_input = self._input_builder(prompt=prompt)
        replicate_input.update(model_kwargs)

        last_error: Exception | None = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                image = self._request_image(replicate_input)
            except Exception as exc:
                kind = classify_image_error(exc)
                logger.warning(
                    "Illustration attempt {}/{} failed ({}): {}",
                    attempt,
                    self._max_attempts,
                    kind.value,
                    exc,
                )
                if kind is FailureKind.RATE_LIMITED:
                    raise RateLimitFailure(
                        f"Image service rate limit reached: {exc}",
                        last_error=exc,
                        attempts=attempt,
                    ) from exc
                if kind is FailureKind.FATAL:
                    raise ImageGenerationFailure(
                        f"Image service rejected the request: {exc}",
                        last_error=exc,
                        attempts=attempt,
                    ) from exc
                last_error = exc
            else:
                if image is not None:
                    return image
                logger.warning(
                    "Attempt {}: no image data in response for prompt: {}",
                    attempt,
                    scene_description,
                )

            if attempt < self._max_attempts:
                delay = self._retry_base_delay * attempt
                logger.debug("Retrying illustration in {:.1f}s.", delay)
                self._sleep(delay)

        message = "No image data received after multiple attempts"
        if last_error is not None:
            message = f"{message}: {last_error}"
        raise ImageGenerationFailure(
            message,
            last_error=last_error,
            attempts=self._max_attempts,
        ) from last_error

    def _request_image(self, replicate_input: dict[str, Any]) -> str | None:
        output = self._client.run(self._model_identifier, input=replicate_input)
        return first_image_data_uri(output, downloader=self._downloader)
