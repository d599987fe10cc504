import pytest

from pixetale.errors import (
    FailureKind,
    ImageGenerationFailure,
    RateLimitFailure,
    classify_image_error,
)

from conftest import StatusError


class _Response:
    def __init__(self, status_code):
        self.status_code = status_code


class _HTTPError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.response = _Response(status_code)


@pytest.mark.parametrize(
    "error, expected",
    [
        (StatusError("Too many requests", status=429), FailureKind.RATE_LIMITED),
        (RuntimeError("RESOURCE_EXHAUSTED: quota exceeded"), FailureKind.RATE_LIMITED),
        (RuntimeError("Request failed with status 429"), FailureKind.RATE_LIMITED),
        (_HTTPError("nope", 401), FailureKind.FATAL),
        (StatusError("forbidden", status=403), FailureKind.FATAL),
        (RuntimeError("Unauthenticated"), FailureKind.FATAL),
        (RuntimeError("Model crashed while sampling"), FailureKind.TRANSIENT),
        (StatusError("server error", status=500), FailureKind.TRANSIENT),
    ],
)
def test_classify_image_error(error, expected):
    assert classify_image_error(error) is expected


def test_rate_limit_failure_is_an_image_failure():
    cause = RuntimeError("429")
    failure = RateLimitFailure("slow down", last_error=cause, attempts=1)

    assert isinstance(failure, ImageGenerationFailure)
    assert failure.last_error is cause
    assert failure.attempts == 1
    assert classify_image_error(failure) is FailureKind.RATE_LIMITED
