"""
Exception hierarchy and failure classification for PixeTale generation calls.
"""

from __future__ import annotations

from enum import Enum


class FailureKind(str, Enum):
    """How the image retry loop should react to an error."""

    RATE_LIMITED = "rate_limited"
    TRANSIENT = "transient"
    FATAL = "fatal"


class PixetaleError(Exception):
    """Base class for every PixeTale generation error."""


class GenerationFailure(PixetaleError):
    """
    The story text could not be produced: the remote call errored, returned nothing,
    or returned something that does not parse as a story.
    """


class ImageGenerationFailure(PixetaleError):
    """
    An illustration could not be produced after the allowed attempts.

    Attributes
    ----------
    last_error:
        The last error observed while calling the image service, if any. ``None``
        when every attempt answered without an image payload.
    attempts:
        Number of attempts consumed before giving up.
    """

    kind: FailureKind = FailureKind.TRANSIENT

    def __init__(
        self,
        message: str,
        *,
        last_error: BaseException | None = None,
        attempts: int = 0,
    ) -> None:
        super().__init__(message)
        self.last_error = last_error
        self.attempts = attempts


class RateLimitFailure(ImageGenerationFailure):
    """The image service reported an exhausted quota; no local retry was made."""

    kind = FailureKind.RATE_LIMITED


class QuestFailure(PixetaleError):
    """A whole generation run was aborted because the story text step failed."""


RATE_LIMIT_MARKERS = ("429", "resource_exhausted", "rate limit", "rate-limit", "too many requests", "quota")
FATAL_STATUS_CODES = frozenset({401, 403})
FATAL_MARKERS = ("unauthenticated", "invalid api token", "permission denied", "unauthorized")


def classify_image_error(error: BaseException) -> FailureKind:
    """
    Map an exception raised by the image service to a :class:`FailureKind`.

    Status codes are read from a ``status`` attribute (Replicate errors) or from an
    attached ``response.status_code`` (``httpx``/``requests`` errors); the message text
    is checked for quota and credential markers as a fallback.
    """
    if isinstance(error, ImageGenerationFailure):
        return error.kind

    status = _status_code(error)
    if status == 429:
        return FailureKind.RATE_LIMITED
    if status in FATAL_STATUS_CODES:
        return FailureKind.FATAL

    message = str(error).lower()
    if any(marker in message for marker in RATE_LIMIT_MARKERS):
        return FailureKind.RATE_LIMITED
    if any(marker in message for marker in FATAL_MARKERS):
        return FailureKind.FATAL
    return FailureKind.TRANSIENT


def _status_code(error: BaseException) -> int | None:
    for candidate in (
        getattr(error, "status", None),
        getattr(error, "status_code", None),
        getattr(getattr(error, "response", None), "status_code", None),
    ):
        if isinstance(candidate, int):
            return candidate
    return None
