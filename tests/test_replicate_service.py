import pytest

from pixetale.ai_generation import ReplicateImageGenerator, decode_data_uri
from pixetale.ai_generation import replicate_service
from pixetale.ai_generation.prompting import NEGATIVE_CONSTRAINTS, STYLE_PREAMBLE
from pixetale.errors import ImageGenerationFailure, RateLimitFailure

from conftest import FakeClock, FakeFileOutput, FakeReplicateClient, StatusError, png_bytes


def _generator(outcomes, **kwargs):
    client = FakeReplicateClient(outcomes)
    clock = FakeClock()
    generator = ReplicateImageGenerator(client=client, sleep_fn=clock, **kwargs)
    return generator, client, clock


def test_request_payload_wraps_scene_in_pixel_art_style():
    generator, client, _ = _generator([[FakeFileOutput(png_bytes())]])

    image = generator.generate_illustration("A cat on a hill")

    assert decode_data_uri(image)[1] == png_bytes()
    model, payload = client.calls[0]
    assert model == "black-forest-labs/flux-schnell"
    assert set(payload) == {"prompt", "aspect_ratio", "output_format", "num_outputs"}
    assert payload["aspect_ratio"] == "3:4"
    assert payload["prompt"].startswith(STYLE_PREAMBLE)
    assert "Scene description: A cat on a hill." in payload["prompt"]
    assert payload["prompt"].endswith(NEGATIVE_CONSTRAINTS)


def test_model_kwargs_override_payload():
    generator, client, _ = _generator([[FakeFileOutput(png_bytes())]])
    generator.generate_illustration("A cat", seed=7)
    assert client.calls[0][1]["seed"] == 7


def test_url_outputs_are_downloaded(monkeypatch):
    downloads = []

    def fake_download(url, *, timeout):
        downloads.append((url, timeout))
        return png_bytes(), "image/png"

    monkeypatch.setattr(replicate_service, "download_image", fake_download)
    generator, _, _ = _generator([["https://replicate.delivery/out-0.png"]], download_timeout=5.0)

    image = generator.generate_illustration("A cat")

    assert downloads == [("https://replicate.delivery/out-0.png", 5.0)]
    assert image.startswith("data:image/png;base64,")


def test_transient_errors_are_retried_with_linear_backoff():
    generator, client, clock = _generator(
        [
            RuntimeError("prediction failed"),
            StatusError("server error", status=500),
            [FakeFileOutput(png_bytes())],
        ]
    )

    image = generator.generate_illustration("A cat")

    assert image.startswith("data:image/png;base64,")
    assert len(client.calls) == 3
    assert clock.sleeps == [2.0, 4.0]


def test_rate_limit_is_raised_without_retry():
    generator, client, clock = _generator(
        [StatusError("Too many requests", status=429), [FakeFileOutput(png_bytes())]]
    )

    with pytest.raises(RateLimitFailure) as excinfo:
        generator.generate_illustration("A cat")

    assert len(client.calls) == 1
    assert clock.sleeps == []
    assert excinfo.value.attempts == 1


def test_resource_exhausted_message_counts_as_rate_limit():
    generator, client, _ = _generator([RuntimeError("RESOURCE_EXHAUSTED: quota")])

    with pytest.raises(RateLimitFailure):
        generator.generate_illustration("A cat")
    assert len(client.calls) == 1


def test_credential_errors_are_not_retried():
    generator, client, _ = _generator([StatusError("Unauthorized", status=401)])

    with pytest.raises(ImageGenerationFailure) as excinfo:
        generator.generate_illustration("A cat")

    assert not isinstance(excinfo.value, RateLimitFailure)
    assert len(client.calls) == 1


def test_exhausted_attempts_keep_last_error():
    errors = [RuntimeError("first"), RuntimeError("second"), RuntimeError("third")]
    generator, client, clock = _generator(list(errors))

    with pytest.raises(ImageGenerationFailure) as excinfo:
        generator.generate_illustration("A cat")

    assert len(client.calls) == 3
    assert clock.sleeps == [2.0, 4.0]
    assert excinfo.value.last_error is errors[-1]
    assert excinfo.value.attempts == 3
    assert "No image data received after multiple attempts" in str(excinfo.value)


def test_empty_outputs_count_as_failed_attempts():
    generator, client, _ = _generator([[], None, [FakeFileOutput(b"")]])

    with pytest.raises(ImageGenerationFailure) as excinfo:
        generator.generate_illustration("A cat")

    assert len(client.calls) == 3
    assert excinfo.value.last_error is None


def test_max_attempts_is_configurable():
    generator, client, clock = _generator([RuntimeError("nope")], max_attempts=1)

    with pytest.raises(ImageGenerationFailure):
        generator.generate_illustration("A cat")

    assert len(client.calls) == 1
    assert clock.sleeps == []


def test_unknown_model_is_rejected():
    with pytest.raises(ValueError, match="not configured"):
        ReplicateImageGenerator(client=FakeReplicateClient([]), model_identifier="acme/unknown")


def test_versioned_model_identifier_is_accepted():
    generator = ReplicateImageGenerator(
        client=FakeReplicateClient([]),
        model_identifier="black-forest-labs/flux-dev:abc123",
    )
    assert generator.model_identifier == "black-forest-labs/flux-dev:abc123"


def test_missing_token_is_rejected(monkeypatch):
    monkeypatch.delenv("REPLICATE_API_TOKEN", raising=False)
    with pytest.raises(ValueError, match="REPLICATE_API_TOKEN"):
        ReplicateImageGenerator()
